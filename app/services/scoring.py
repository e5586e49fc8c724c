"""Ranking score and grade tier computation.

A submission is compared to the ideal ranking with the footrule distance
(sum of absolute position displacements). Every unit of distance costs
12.5 points, so a perfect ranking scores 100 and a fully reversed one 0.
"""
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from app.core.config import Settings

MAX_SCORE = 100
MIN_SCORE = 0
POINTS_PER_DISTANCE = 12.5


class GradeTier(str, Enum):
    GREAT = "Great"
    GOOD = "Good"
    RISKY = "Risky"


@dataclass(frozen=True)
class ScoringConfig:
    """Grade thresholds; also used when reports bucket scores into tiers."""

    great_threshold: int = 90
    good_threshold: int = 60

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringConfig":
        return cls(
            great_threshold=settings.grade_great_threshold,
            good_threshold=settings.grade_good_threshold,
        )


DEFAULT_SCORING_CONFIG = ScoringConfig()


@dataclass(frozen=True)
class RankingScore:
    value: int
    tier: GradeTier


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def ranking_distance(submitted: Sequence[str], ideal: Sequence[str]) -> int:
    """Footrule distance; options missing from the ideal ranking add nothing."""
    ideal_positions = {option_id: pos for pos, option_id in enumerate(ideal)}
    distance = 0
    for pos, option_id in enumerate(submitted):
        ideal_pos = ideal_positions.get(option_id)
        if ideal_pos is None:
            continue
        distance += abs(pos - ideal_pos)
    return distance


def score_from_distance(distance: int) -> int:
    """Linear penalty, clamped to 0..100. Distance 8 (reversed 4-ranking) gives exactly 0."""
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(MAX_SCORE - distance * POINTS_PER_DISTANCE)))


def get_grade_tier(score: int, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> GradeTier:
    if score >= config.great_threshold:
        return GradeTier.GREAT
    if score >= config.good_threshold:
        return GradeTier.GOOD
    return GradeTier.RISKY


def score_ranking(
    submitted: Sequence[str],
    ideal: Sequence[str],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> RankingScore:
    value = score_from_distance(ranking_distance(submitted, ideal))
    return RankingScore(value=value, tier=get_grade_tier(value, config))
