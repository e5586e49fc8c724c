from app.schemas.attempt import AttemptOutSchema, AttemptSubmitSchema, BestAttemptSchema
from app.schemas.challenge import (
    ChallengeCreateSchema,
    ChallengeOutSchema,
    OptionCreateSchema,
    OptionOutSchema,
    OptionRevealSchema,
)
from app.schemas.stats import (
    ChallengeStatsOutSchema,
    OptionStatSchema,
    PopulationStatsSchema,
    ResultsOutSchema,
    StreakOutSchema,
)

__all__ = [
    "AttemptOutSchema",
    "AttemptSubmitSchema",
    "BestAttemptSchema",
    "ChallengeCreateSchema",
    "ChallengeOutSchema",
    "ChallengeStatsOutSchema",
    "OptionCreateSchema",
    "OptionOutSchema",
    "OptionRevealSchema",
    "OptionStatSchema",
    "PopulationStatsSchema",
    "ResultsOutSchema",
    "StreakOutSchema",
]
