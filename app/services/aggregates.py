"""Incrementally maintained population statistics per challenge.

Each best attempt contributes one top pick, two top-two entries, one exact
ranking and one histogram bucket. Updates are applied as deltas on the
stored counters; historical attempts are never rescanned here.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.aggregate import Aggregate
from app.services.scoring import round_half_up

logger = logging.getLogger(__name__)

NEUTRAL_PERCENTILE = 50


def canonical_ranking_key(ranking: Sequence[str]) -> str:
    return ",".join(ranking)


def _bump(counts: dict, key, delta: int) -> None:
    value = max(0, counts.get(key, 0) + delta)
    if value:
        counts[key] = value
    else:
        counts.pop(key, None)


@dataclass
class AggregateCounts:
    best_attempt_count: int = 0
    top_pick_counts: dict[str, int] = field(default_factory=dict)
    top_two_counts: dict[str, int] = field(default_factory=dict)
    exact_ranking_counts: dict[str, int] = field(default_factory=dict)
    score_histogram: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Aggregate) -> "AggregateCounts":
        return cls(
            best_attempt_count=row.best_attempt_count or 0,
            top_pick_counts={k: int(v) for k, v in (row.top_pick_counts_json or {}).items()},
            top_two_counts={k: int(v) for k, v in (row.top_two_counts_json or {}).items()},
            exact_ranking_counts={k: int(v) for k, v in (row.exact_ranking_counts_json or {}).items()},
            score_histogram={int(k): int(v) for k, v in (row.score_histogram_json or {}).items()},
        )

    def store(self, row: Aggregate) -> None:
        # assign fresh dicts: in-place JSON mutation is not change-tracked
        row.best_attempt_count = self.best_attempt_count
        row.top_pick_counts_json = dict(self.top_pick_counts)
        row.top_two_counts_json = dict(self.top_two_counts)
        row.exact_ranking_counts_json = dict(self.exact_ranking_counts)
        row.score_histogram_json = {str(k): v for k, v in sorted(self.score_histogram.items())}

    def _add_ranking(self, ranking: Sequence[str], delta: int) -> None:
        if not ranking:
            return
        _bump(self.top_pick_counts, ranking[0], delta)
        for option_id in ranking[:2]:
            _bump(self.top_two_counts, option_id, delta)
        _bump(self.exact_ranking_counts, canonical_ranking_key(ranking), delta)

    def record_best(
        self,
        new_ranking: Sequence[str],
        new_score: int,
        previous_score: int | None,
        previous_ranking: Sequence[str] | None = None,
        symmetric: bool = False,
    ) -> None:
        """Fold one new best attempt in; previous_* describe the best it replaces, if any."""
        self._add_ranking(new_ranking, +1)
        _bump(self.score_histogram, new_score, +1)

        if previous_score is None:
            self.best_attempt_count += 1
            return

        # replacement: the user's histogram entry moves, the count stays
        _bump(self.score_histogram, previous_score, -1)
        if symmetric and previous_ranking:
            self._add_ranking(previous_ranking, -1)

    def percentile_of(self, score: int) -> int:
        if self.best_attempt_count <= 0:
            return NEUTRAL_PERCENTILE
        below = sum(count for bucket, count in self.score_histogram.items() if bucket < score)
        return max(0, min(100, round_half_up(below / self.best_attempt_count * 100)))

    def share_percent(self, count: int) -> int:
        if self.best_attempt_count <= 0:
            return 0
        return max(0, min(100, round_half_up(count / self.best_attempt_count * 100)))


async def _load_row(db: AsyncSession, challenge_id: str, for_update: bool = False) -> Aggregate | None:
    # always refresh from the row, never trust an identity-map copy
    stmt = (
        select(Aggregate)
        .where(Aggregate.challenge_id == challenge_id)
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


def new_aggregate_row(challenge_id: str) -> Aggregate:
    row = Aggregate(challenge_id=challenge_id)
    AggregateCounts().store(row)
    return row


async def apply_new_best(
    db: AsyncSession,
    challenge_id: str,
    new_ranking: Sequence[str],
    new_score: int,
    previous_score: int | None,
    previous_ranking: Sequence[str] | None = None,
    *,
    symmetric: bool = False,
) -> AggregateCounts:
    """Merge one new best attempt into the challenge aggregate.

    Runs in the caller's transaction; the row lock (FOR UPDATE) linearizes
    concurrent writers on the same challenge.
    """
    row = await _load_row(db, challenge_id, for_update=True)
    if row is None:
        row = new_aggregate_row(challenge_id)
        db.add(row)

    counts = AggregateCounts.from_row(row)
    counts.record_best(new_ranking, new_score, previous_score, previous_ranking, symmetric=symmetric)
    counts.store(row)
    row.updated_at = datetime.now(timezone.utc)
    await db.flush()

    logger.debug(
        "Aggregate %s: count=%d score=%d replaced=%s",
        challenge_id,
        counts.best_attempt_count,
        new_score,
        previous_score,
    )
    return counts


async def get_aggregate(db: AsyncSession, challenge_id: str) -> AggregateCounts | None:
    row = await _load_row(db, challenge_id)
    return AggregateCounts.from_row(row) if row is not None else None


async def percentile_of(db: AsyncSession, challenge_id: str, score: int) -> int:
    """Share (0-100) of best attempts scoring strictly below score; 50 when empty."""
    counts = await get_aggregate(db, challenge_id)
    if counts is None:
        return NEUTRAL_PERCENTILE
    return counts.percentile_of(score)
