"""Pydantic schemas for challenges and their options."""
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

TierLabel = Literal["Optimal", "Reasonable", "Risky"]


class OptionCreateSchema(BaseModel):
    option_text: str = Field(min_length=1)
    tier_label: TierLabel
    explanation_short: str = Field(min_length=1)
    ordering_index: int = Field(ge=1, le=4)


class ChallengeCreateSchema(BaseModel):
    date_key: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    title: str = Field(min_length=1)
    scenario_text: str = Field(min_length=1)
    assumptions: str = ""
    category: str = Field(min_length=1)
    difficulty: int = Field(default=1, ge=1, le=5)
    options: list[OptionCreateSchema]

    @field_validator("date_key")
    @classmethod
    def _real_calendar_day(cls, value: str) -> str:
        # the pattern alone lets through days like 2026-02-30
        date.fromisoformat(value)
        return value


class OptionOutSchema(BaseModel):
    # tier and ordering stay hidden until results
    id: str
    option_text: str

    class Config:
        from_attributes = True


class ChallengeOutSchema(BaseModel):
    id: str
    date_key: str
    title: str
    scenario_text: str
    assumptions: str
    category: str
    difficulty: int
    options: list[OptionOutSchema]

    class Config:
        from_attributes = True


class OptionRevealSchema(OptionOutSchema):
    tier_label: str
    explanation_short: str
    ordering_index: int
