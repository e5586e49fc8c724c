from itertools import permutations

import pytest

from app.core.config import Settings
from app.services.scoring import (
    DEFAULT_SCORING_CONFIG,
    GradeTier,
    ScoringConfig,
    get_grade_tier,
    ranking_distance,
    round_half_up,
    score_from_distance,
    score_ranking,
)

IDEAL = ["A", "B", "C", "D"]
ALL_RANKINGS = [list(p) for p in permutations(IDEAL)]


def test_score_stays_within_bounds_for_every_pair_of_permutations():
    for ideal in ALL_RANKINGS:
        for submitted in ALL_RANKINGS:
            assert 0 <= score_ranking(submitted, ideal).value <= 100


@pytest.mark.parametrize("ideal", ALL_RANKINGS)
def test_ideal_ranking_scores_100(ideal):
    result = score_ranking(ideal, ideal)
    assert result.value == 100
    assert result.tier is GradeTier.GREAT


@pytest.mark.parametrize("ideal", ALL_RANKINGS)
def test_reversed_ranking_scores_0(ideal):
    reversed_ranking = list(reversed(ideal))
    assert ranking_distance(reversed_ranking, ideal) == 8
    result = score_ranking(reversed_ranking, ideal)
    assert result.value == 0
    assert result.tier is GradeTier.RISKY


def test_adjacent_swap_costs_25_points():
    assert ranking_distance(["B", "A", "C", "D"], IDEAL) == 2
    assert score_ranking(["B", "A", "C", "D"], IDEAL).value == 75
    assert score_ranking(["A", "B", "D", "C"], IDEAL).value == 75
    assert score_ranking(["A", "C", "B", "D"], IDEAL).value == 75


def test_scores_take_only_quarter_steps_for_permutations():
    values = {score_ranking(r, IDEAL).value for r in ALL_RANKINGS}
    assert values == {0, 25, 50, 75, 100}


def test_option_missing_from_ideal_adds_no_distance():
    assert ranking_distance(["X", "A", "C", "D"], IDEAL) == 1
    # 100 - 12.5 = 87.5 rounds half up
    assert score_ranking(["X", "A", "C", "D"], IDEAL).value == 88


def test_round_half_up():
    assert round_half_up(87.5) == 88
    assert round_half_up(62.5) == 63
    assert round_half_up(12.4) == 12
    assert round_half_up(0.0) == 0


def test_score_from_distance_never_negative():
    assert score_from_distance(8) == 0
    assert score_from_distance(12) == 0


def test_default_grade_thresholds():
    assert get_grade_tier(100) is GradeTier.GREAT
    assert get_grade_tier(90) is GradeTier.GREAT
    assert get_grade_tier(89) is GradeTier.GOOD
    assert get_grade_tier(60) is GradeTier.GOOD
    assert get_grade_tier(59) is GradeTier.RISKY
    assert score_ranking(["B", "A", "C", "D"], IDEAL).tier is GradeTier.GOOD


def test_thresholds_are_injectable():
    strict = ScoringConfig(great_threshold=100, good_threshold=80)
    assert score_ranking(["B", "A", "C", "D"], IDEAL, strict).tier is GradeTier.RISKY
    assert score_ranking(IDEAL, IDEAL, strict).tier is GradeTier.GREAT


def test_scoring_config_from_settings():
    settings = Settings(_env_file=None, grade_great_threshold=75, grade_good_threshold=50)
    config = ScoringConfig.from_settings(settings)
    assert config == ScoringConfig(great_threshold=75, good_threshold=50)
    assert score_ranking(["B", "A", "C", "D"], IDEAL, config).tier is GradeTier.GREAT
    assert DEFAULT_SCORING_CONFIG == ScoringConfig(90, 60)
