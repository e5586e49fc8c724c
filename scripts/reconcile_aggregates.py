"""Repair best-attempt flags and rebuild challenge aggregates.

Usage:
    python scripts/reconcile_aggregates.py             # all challenges
    python scripts/reconcile_aggregates.py <id> [...]  # selected challenges
"""
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select  # noqa: E402

from app.core.config import get_settings  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.db.session import AsyncSessionLocal, engine  # noqa: E402
from app.models.challenge import Challenge  # noqa: E402
from app.services.maintenance import cleanup_duplicate_best_attempts, rebuild_aggregate  # noqa: E402

logger = logging.getLogger("reconcile_aggregates")


async def main(challenge_ids: list[str]) -> None:
    async with AsyncSessionLocal() as db:
        async with db.begin():
            cleared = await cleanup_duplicate_best_attempts(db)
            logger.info("Cleared %d duplicate best flags", cleared)

            if not challenge_ids:
                result = await db.execute(select(Challenge.id).order_by(Challenge.date_key))
                challenge_ids = list(result.scalars().all())
            for challenge_id in challenge_ids:
                await rebuild_aggregate(db, challenge_id)
    await engine.dispose()


if __name__ == "__main__":
    configure_logging(get_settings())
    asyncio.run(main(sys.argv[1:]))
