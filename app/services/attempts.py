"""Attempt submission: score, record, and fold new bests into the aggregate.

Every submission is stored. Only a strictly higher score than the user's
current best replaces it (ties keep the earlier attempt), and only a new
best touches the aggregate and the streak. Everything for one submission
commits in a single transaction.
"""
import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings
from app.core.errors import ConcurrencyConflict, storage_error_from
from app.core.locks import KeyedLockStore
from app.models.attempt import Attempt
from app.schemas.attempt import AttemptOutSchema
from app.services.aggregates import apply_new_best
from app.services.challenges import (
    get_challenge,
    ideal_ranking,
    validate_date_key,
    validate_ranking,
)
from app.services.scoring import ScoringConfig, score_ranking
from app.services.streaks import recalculate_streak

logger = logging.getLogger(__name__)


async def get_best_attempt(
    db: AsyncSession, user_id: str, challenge_id: str, for_update: bool = False
) -> Attempt | None:
    stmt = select(Attempt).where(
        Attempt.user_id == user_id,
        Attempt.challenge_id == challenge_id,
        Attempt.is_best_attempt.is_(True),
    ).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalars().first()


class AttemptService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        locks: KeyedLockStore | None = None,
    ):
        self.session_factory = session_factory
        self.scoring = ScoringConfig.from_settings(settings)
        self.symmetric_replacement = settings.symmetric_aggregate_replacement
        self.max_retries = max(1, settings.submit_max_retries)
        self.locks = locks or KeyedLockStore()

    async def submit(
        self, user_id: str, challenge_id: str, date_key: str | None, ranking: Sequence[str]
    ) -> AttemptOutSchema:
        ranking = list(ranking)
        async with self.locks.hold((user_id, challenge_id)):
            try_no = 1
            while True:
                try:
                    return await self._submit_once(user_id, challenge_id, date_key, ranking)
                except ConcurrencyConflict as exc:
                    if try_no >= self.max_retries:
                        logger.error(
                            "Giving up on attempt for user=%s challenge=%s after %d tries: %s",
                            user_id, challenge_id, try_no, exc.detail,
                        )
                        raise
                    logger.warning(
                        "Conflict on attempt for user=%s challenge=%s (try %d/%d): %s",
                        user_id, challenge_id, try_no, self.max_retries, exc.detail,
                    )
                    try_no += 1

    async def _submit_once(
        self, user_id: str, challenge_id: str, date_key: str | None, ranking: list[str]
    ) -> AttemptOutSchema:
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    return await self._score_and_record(db, user_id, challenge_id, date_key, ranking)
        except (DBAPIError, OSError) as exc:
            raise storage_error_from(exc) from exc

    async def _score_and_record(
        self, db: AsyncSession, user_id: str, challenge_id: str, date_key: str | None, ranking: list[str]
    ) -> AttemptOutSchema:
        challenge = await get_challenge(db, challenge_id)
        ideal = ideal_ranking(challenge.options)
        validate_ranking(ranking, ideal)
        validate_date_key(date_key)

        result = score_ranking(ranking, ideal, self.scoring)

        existing_best = await get_best_attempt(db, user_id, challenge_id, for_update=True)
        is_new_best = existing_best is None or result.value > existing_best.score_numeric

        if is_new_best and existing_best is not None:
            # clear the old flag first so the one-best-per-user index never sees two
            existing_best.is_best_attempt = False
            await db.flush()

        attempt = Attempt(
            user_id=user_id,
            challenge_id=challenge_id,
            date_key=date_key,
            ranking_json=ranking,
            score_numeric=result.value,
            grade_tier=result.tier.value,
            is_best_attempt=is_new_best,
        )
        db.add(attempt)
        await db.flush()

        if is_new_best:
            await apply_new_best(
                db,
                challenge_id,
                ranking,
                result.value,
                existing_best.score_numeric if existing_best else None,
                existing_best.ranking_json if existing_best else None,
                symmetric=self.symmetric_replacement,
            )
            await recalculate_streak(db, user_id)
            logger.info(
                "New best for user=%s challenge=%s: %d (was %s)",
                user_id, challenge_id, result.value,
                existing_best.score_numeric if existing_best else None,
            )

        return AttemptOutSchema(attempt_id=attempt.id, score=result.value, grade=result.tier.value)
