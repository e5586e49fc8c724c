"""Challenge loading, creation and ranking validation."""
import logging
from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import InvalidInput, NotFound
from app.models.challenge import Challenge, ChallengeOption
from app.schemas.challenge import ChallengeCreateSchema, OptionCreateSchema
from app.services.aggregates import new_aggregate_row

logger = logging.getLogger(__name__)

OPTIONS_PER_CHALLENGE = 4


def ideal_ranking(options: Iterable[ChallengeOption]) -> list[str]:
    """Option ids sorted by ordering_index."""
    return [opt.id for opt in sorted(options, key=lambda o: o.ordering_index)]


def validate_ranking(ranking: Sequence[str], ideal: Sequence[str]) -> None:
    """Raise InvalidInput unless ranking is a permutation of the challenge's option ids."""
    if len(ranking) != len(ideal):
        raise InvalidInput(f"Ranking must contain exactly {len(ideal)} options")
    if len(set(ranking)) != len(ranking):
        raise InvalidInput("Ranking contains duplicate options")
    unknown = set(ranking) - set(ideal)
    if unknown:
        raise InvalidInput(f"Unknown option ids: {', '.join(sorted(unknown))}")


def validate_date_key(date_key: str | None) -> None:
    """Raise InvalidInput unless date_key is None or a real YYYY-MM-DD day."""
    if date_key is None:
        return
    try:
        parsed = date.fromisoformat(date_key)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid date key: {date_key!r}") from None
    if parsed.isoformat() != date_key:
        raise InvalidInput(f"Invalid date key: {date_key!r}")


def _validate_options(options: Sequence[OptionCreateSchema]) -> None:
    if len(options) != OPTIONS_PER_CHALLENGE:
        raise InvalidInput(f"A challenge needs exactly {OPTIONS_PER_CHALLENGE} options")
    indexes = sorted(o.ordering_index for o in options)
    if indexes != list(range(1, OPTIONS_PER_CHALLENGE + 1)):
        raise InvalidInput("ordering_index values must be a permutation of 1..4")


def _option_rows(options: Sequence[OptionCreateSchema]) -> list[ChallengeOption]:
    return [
        ChallengeOption(
            option_text=o.option_text,
            tier_label=o.tier_label,
            explanation_short=o.explanation_short,
            ordering_index=o.ordering_index,
        )
        for o in options
    ]


async def get_challenge(db: AsyncSession, challenge_id: str) -> Challenge:
    result = await db.execute(
        select(Challenge).options(selectinload(Challenge.options)).where(Challenge.id == challenge_id)
    )
    challenge = result.scalar_one_or_none()
    if challenge is None:
        raise NotFound("Challenge not found")
    if not challenge.options:
        raise NotFound("Challenge has no options")
    return challenge


async def get_challenge_by_date(db: AsyncSession, date_key: str) -> Challenge:
    result = await db.execute(
        select(Challenge).options(selectinload(Challenge.options)).where(Challenge.date_key == date_key)
    )
    challenge = result.scalar_one_or_none()
    if challenge is None:
        raise NotFound("Challenge not found")
    return challenge


async def create_challenge(db: AsyncSession, data: ChallengeCreateSchema) -> Challenge:
    """Create a challenge with its options and an all-zero aggregate; caller commits."""
    _validate_options(data.options)
    existing = await db.execute(select(Challenge.id).where(Challenge.date_key == data.date_key))
    if existing.scalar_one_or_none() is not None:
        raise InvalidInput(f"A challenge already exists for {data.date_key}")

    challenge = Challenge(
        date_key=data.date_key,
        title=data.title,
        scenario_text=data.scenario_text,
        assumptions=data.assumptions,
        category=data.category,
        difficulty=data.difficulty,
        options=_option_rows(data.options),
    )
    db.add(challenge)
    await db.flush()
    db.add(new_aggregate_row(challenge.id))
    await db.flush()
    logger.info("Created challenge %s for %s", challenge.id, challenge.date_key)
    return challenge


async def replace_options(
    db: AsyncSession, challenge_id: str, options: Sequence[OptionCreateSchema]
) -> Challenge:
    """Swap the full option set in one go; caller commits."""
    _validate_options(options)
    found = await db.execute(select(Challenge.id).where(Challenge.id == challenge_id))
    if found.scalar_one_or_none() is None:
        raise NotFound("Challenge not found")
    await db.execute(
        delete(ChallengeOption)
        .where(ChallengeOption.challenge_id == challenge_id)
        .execution_options(synchronize_session=False)
    )
    for row in _option_rows(options):
        row.challenge_id = challenge_id
        db.add(row)
    await db.flush()
    logger.info("Replaced options of challenge %s", challenge_id)
    return await _reload(db, challenge_id)


async def _reload(db: AsyncSession, challenge_id: str) -> Challenge:
    result = await db.execute(
        select(Challenge)
        .options(selectinload(Challenge.options))
        .where(Challenge.id == challenge_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
