from app.services.attempts import AttemptService
from app.services.scoring import ScoringConfig, score_ranking
from app.services.seeding import seed_challenges

__all__ = ["AttemptService", "ScoringConfig", "score_ranking", "seed_challenges"]
