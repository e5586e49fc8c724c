"""Daily completion streaks, recomputed from the user's best attempts."""
from collections.abc import Iterable
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attempt import Attempt
from app.models.streak import Streak


def compute_streaks(date_keys: Iterable[str]) -> tuple[int, int, str | None]:
    """Return (current, longest, last_date_key) for a set of YYYY-MM-DD keys.

    current is the run of consecutive days ending at the latest key, so
    completions made out of order still count.
    """
    days = sorted({date.fromisoformat(key) for key in date_keys})
    if not days:
        return 0, 0, None

    longest = run = 1
    for prev, cur in zip(days, days[1:]):
        run = run + 1 if (cur - prev).days == 1 else 1
        longest = max(longest, run)
    return run, longest, days[-1].isoformat()


async def recalculate_streak(db: AsyncSession, user_id: str) -> Streak:
    result = await db.execute(
        select(Attempt.date_key)
        .where(
            Attempt.user_id == user_id,
            Attempt.is_best_attempt.is_(True),
            Attempt.date_key.is_not(None),
        )
        .distinct()
    )
    current, longest, last_key = compute_streaks(result.scalars().all())

    streak = await db.get(Streak, user_id)
    if streak is None:
        streak = Streak(user_id=user_id)
        db.add(streak)
    streak.current_streak = current
    streak.longest_streak = longest
    streak.last_completed_date_key = last_key
    await db.flush()
    return streak


async def get_streak(db: AsyncSession, user_id: str) -> Streak | None:
    return await db.get(Streak, user_id, populate_existing=True)
