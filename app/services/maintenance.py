"""Operator repairs. Never part of the normal submission path."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.aggregate import Aggregate
from app.models.attempt import Attempt
from app.services.aggregates import AggregateCounts, new_aggregate_row

logger = logging.getLogger(__name__)


async def cleanup_duplicate_best_attempts(db: AsyncSession) -> int:
    """Leave one best flag per (user, challenge): highest score, earliest on ties.

    Returns the number of flags cleared; caller commits.
    """
    dupes = await db.execute(
        select(Attempt.user_id, Attempt.challenge_id)
        .where(Attempt.is_best_attempt.is_(True))
        .group_by(Attempt.user_id, Attempt.challenge_id)
        .having(func.count(Attempt.id) > 1)
    )
    cleared = 0
    for user_id, challenge_id in dupes.all():
        result = await db.execute(
            select(Attempt)
            .where(
                Attempt.user_id == user_id,
                Attempt.challenge_id == challenge_id,
                Attempt.is_best_attempt.is_(True),
            )
            .order_by(Attempt.score_numeric.desc(), Attempt.submitted_at.asc(), Attempt.id.asc())
        )
        keep, *extra = result.scalars().all()
        for attempt in extra:
            attempt.is_best_attempt = False
        cleared += len(extra)
        logger.info(
            "User %s challenge %s: kept best %s (score %d), cleared %d",
            user_id, challenge_id, keep.id, keep.score_numeric, len(extra),
        )
    await db.flush()
    return cleared


async def rebuild_aggregate(db: AsyncSession, challenge_id: str) -> AggregateCounts:
    """Recount a challenge aggregate from its current best attempts; caller commits.

    The rebuilt top-pick/top-two/exact counts describe current bests only,
    even when live updates keep replaced rankings.
    """
    result = await db.execute(
        select(Attempt.ranking_json, Attempt.score_numeric).where(
            Attempt.challenge_id == challenge_id,
            Attempt.is_best_attempt.is_(True),
        )
    )
    counts = AggregateCounts()
    for ranking, score in result.all():
        counts.record_best(list(ranking), score, previous_score=None)

    row = await db.get(Aggregate, challenge_id, populate_existing=True)
    if row is None:
        row = new_aggregate_row(challenge_id)
        db.add(row)
    counts.store(row)
    await db.flush()
    logger.info("Rebuilt aggregate %s from %d best attempts", challenge_id, counts.best_attempt_count)
    return counts
