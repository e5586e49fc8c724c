from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.core.errors import InvalidInput, NotFound
from app.models.challenge import Challenge
from app.schemas.challenge import ChallengeCreateSchema, OptionCreateSchema
from app.services.aggregates import AggregateCounts, get_aggregate
from app.services.challenges import (
    create_challenge,
    get_challenge,
    get_challenge_by_date,
    ideal_ranking,
    replace_options,
    validate_date_key,
    validate_ranking,
)
from tests.conftest import make_challenge_data


def test_ideal_ranking_sorts_by_ordering_index():
    options = [SimpleNamespace(id=f"o{i}", ordering_index=i) for i in (3, 1, 4, 2)]
    assert ideal_ranking(options) == ["o1", "o2", "o3", "o4"]


def test_validate_ranking_accepts_permutation():
    validate_ranking(["b", "a", "d", "c"], ["a", "b", "c", "d"])


@pytest.mark.parametrize(
    "ranking, message",
    [
        (["a", "b", "c"], "exactly 4"),
        (["a", "b", "c", "d", "a"], "exactly 4"),
        (["a", "a", "b", "c"], "duplicate"),
        (["a", "b", "c", "x"], "Unknown option ids: x"),
    ],
)
def test_validate_ranking_rejects(ranking, message):
    with pytest.raises(InvalidInput) as exc:
        validate_ranking(ranking, ["a", "b", "c", "d"])
    assert message in exc.value.detail


async def test_create_challenge_stores_options_and_zero_aggregate(db, challenge):
    loaded = await get_challenge(db, challenge.id)
    assert [o.ordering_index for o in loaded.options] == [1, 2, 3, 4]
    assert await get_aggregate(db, challenge.id) == AggregateCounts()


async def test_create_challenge_rejects_duplicate_date(db, challenge):
    with pytest.raises(InvalidInput):
        await create_challenge(db, make_challenge_data(date_key=challenge.date_key, title="Again"))


async def test_create_challenge_needs_four_options(db):
    data = make_challenge_data()
    data.options = data.options[:3]
    with pytest.raises(InvalidInput):
        await create_challenge(db, data)


async def test_create_challenge_needs_distinct_ordering_indexes(db):
    data = make_challenge_data()
    data.options[3].ordering_index = 3
    with pytest.raises(InvalidInput):
        await create_challenge(db, data)


def test_date_key_format_is_checked():
    with pytest.raises(ValidationError):
        make_challenge_data(date_key="03/01/2026")


@pytest.mark.parametrize("date_key", ["2026-02-30", "2026-13-01", "2025-02-29"])
def test_date_key_must_be_a_real_day(date_key):
    with pytest.raises(ValidationError):
        make_challenge_data(date_key=date_key)


def test_validate_date_key():
    validate_date_key("2028-02-29")
    validate_date_key(None)
    for bad in ("2026-02-30", "not-a-date", "20260301", ""):
        with pytest.raises(InvalidInput):
            validate_date_key(bad)


async def test_get_challenge_by_date(db, challenge):
    found = await get_challenge_by_date(db, "2026-03-01")
    assert found.id == challenge.id
    with pytest.raises(NotFound):
        await get_challenge_by_date(db, "1999-01-01")


async def test_missing_challenge_is_not_found(db):
    with pytest.raises(NotFound):
        await get_challenge(db, "missing")


async def test_challenge_without_options_is_not_found(db):
    bare = Challenge(date_key="2026-04-01", title="Bare", scenario_text="-", category="Misc")
    db.add(bare)
    await db.commit()
    with pytest.raises(NotFound):
        await get_challenge(db, bare.id)


async def test_replace_options_swaps_the_whole_set(db, challenge, ideal):
    new_options = [
        OptionCreateSchema(
            option_text=f"New {i}", tier_label="Reasonable", explanation_short="-", ordering_index=i
        )
        for i in (1, 2, 3, 4)
    ]
    updated = await replace_options(db, challenge.id, new_options)
    await db.commit()

    assert [o.option_text for o in updated.options] == ["New 1", "New 2", "New 3", "New 4"]
    assert set(ideal_ranking(updated.options)).isdisjoint(ideal)


async def test_replace_options_on_missing_challenge(db):
    options = [o for o in make_challenge_data().options]
    with pytest.raises(NotFound):
        await replace_options(db, "missing", options)


def test_create_schema_rejects_unknown_tier():
    data = make_challenge_data().model_dump()
    data["options"][0]["tier_label"] = "Great"
    with pytest.raises(ValidationError):
        ChallengeCreateSchema(**data)
