from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from app.models.attempt import Attempt
from app.services.aggregates import get_aggregate
from app.services.maintenance import cleanup_duplicate_best_attempts, rebuild_aggregate

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
async def legacy_db(engine, db):
    """A database from before the one-best index existed."""
    async with engine.begin() as conn:
        await conn.execute(text("DROP INDEX uq_attempts_one_best_per_user_challenge"))
    return db


def _best(challenge_id, user_id, ranking, score, minutes):
    return Attempt(
        user_id=user_id,
        challenge_id=challenge_id,
        date_key="2026-03-01",
        ranking_json=ranking,
        score_numeric=score,
        grade_tier="Good",
        is_best_attempt=True,
        submitted_at=T0 + timedelta(minutes=minutes),
    )


async def test_cleanup_keeps_highest_score(legacy_db, challenge, ideal):
    low = _best(challenge.id, "u1", list(reversed(ideal)), 0, 0)
    high = _best(challenge.id, "u1", ideal, 100, 5)
    other = _best(challenge.id, "u2", ideal, 100, 1)
    legacy_db.add_all([low, high, other])
    await legacy_db.commit()

    cleared = await cleanup_duplicate_best_attempts(legacy_db)
    await legacy_db.commit()

    assert cleared == 1
    assert high.is_best_attempt and other.is_best_attempt
    assert not low.is_best_attempt


async def test_cleanup_keeps_earliest_on_tie(legacy_db, challenge, ideal):
    first = _best(challenge.id, "u1", ideal, 100, 0)
    second = _best(challenge.id, "u1", ideal, 100, 3)
    third = _best(challenge.id, "u1", ideal, 100, 7)
    legacy_db.add_all([third, first, second])
    await legacy_db.commit()

    assert await cleanup_duplicate_best_attempts(legacy_db) == 2
    assert first.is_best_attempt
    assert not second.is_best_attempt and not third.is_best_attempt


async def test_cleanup_with_nothing_to_do(db, challenge):
    assert await cleanup_duplicate_best_attempts(db) == 0


async def test_rebuild_counts_only_current_bests(db, service, challenge, ideal):
    swapped = [ideal[1], ideal[0], ideal[2], ideal[3]]
    await service.submit("u1", challenge.id, "2026-03-01", swapped)
    await service.submit("u1", challenge.id, "2026-03-01", ideal)
    await service.submit("u2", challenge.id, "2026-03-01", list(reversed(ideal)))

    live = await get_aggregate(db, challenge.id)
    # live updates keep the replaced ranking
    assert live.top_pick_counts == {ideal[0]: 1, ideal[1]: 1, ideal[3]: 1}

    rebuilt = await rebuild_aggregate(db, challenge.id)
    await db.commit()

    assert rebuilt.best_attempt_count == 2
    assert rebuilt.score_histogram == live.score_histogram == {100: 1, 0: 1}
    assert rebuilt.top_pick_counts == {ideal[0]: 1, ideal[3]: 1}
    assert await get_aggregate(db, challenge.id) == rebuilt
