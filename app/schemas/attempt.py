"""Pydantic schemas for attempt submission."""
from pydantic import BaseModel


class AttemptSubmitSchema(BaseModel):
    challenge_id: str
    # length and membership are checked against the challenge, not here
    ranking: list[str]


class AttemptOutSchema(BaseModel):
    attempt_id: str
    score: int
    grade: str


class BestAttemptSchema(BaseModel):
    id: str
    ranking: list[str]
    score: int
    grade: str
    date_key: str | None = None
