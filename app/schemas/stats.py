"""Pydantic schemas for results, population stats and streaks."""
from pydantic import BaseModel

from app.schemas.attempt import BestAttemptSchema
from app.schemas.challenge import OptionRevealSchema


class PopulationStatsSchema(BaseModel):
    percentile: int
    exact_match_percent: int
    top_pick_percent: int
    total_attempts: int
    grade_distribution: dict[str, int]


class ResultsOutSchema(BaseModel):
    challenge_id: str
    attempt: BestAttemptSchema
    options: list[OptionRevealSchema]
    stats: PopulationStatsSchema


class OptionStatSchema(BaseModel):
    option_id: str
    option_text: str
    count: int
    percentage: int


class ChallengeStatsOutSchema(BaseModel):
    challenge_id: str
    challenge_title: str
    total_attempts: int
    top_pick_stats: list[OptionStatSchema]
    top_two_stats: list[OptionStatSchema]


class StreakOutSchema(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date_key: str | None = None
