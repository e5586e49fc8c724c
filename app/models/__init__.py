from app.models.challenge import Challenge, ChallengeOption
from app.models.attempt import Attempt
from app.models.aggregate import Aggregate
from app.models.streak import Streak

__all__ = ["Challenge", "ChallengeOption", "Attempt", "Aggregate", "Streak"]
