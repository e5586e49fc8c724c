"""Results view: how a user's best attempt compares to everyone else's."""
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.schemas.attempt import BestAttemptSchema
from app.schemas.challenge import OptionRevealSchema
from app.schemas.stats import (
    ChallengeStatsOutSchema,
    OptionStatSchema,
    PopulationStatsSchema,
    ResultsOutSchema,
)
from app.services.aggregates import AggregateCounts, canonical_ranking_key, get_aggregate
from app.services.attempts import get_best_attempt
from app.services.challenges import get_challenge
from app.services.scoring import GradeTier, ScoringConfig, get_grade_tier


def grade_distribution(counts: AggregateCounts, config: ScoringConfig) -> dict[str, int]:
    """Bucket the score histogram into grade tiers."""
    distribution = {tier.value: 0 for tier in GradeTier}
    for score, n in counts.score_histogram.items():
        distribution[get_grade_tier(score, config).value] += n
    return distribution


async def build_results(
    db: AsyncSession, user_id: str, challenge_id: str, config: ScoringConfig
) -> ResultsOutSchema:
    challenge = await get_challenge(db, challenge_id)
    attempt = await get_best_attempt(db, user_id, challenge_id)
    if attempt is None:
        raise NotFound("No attempt found for this challenge")

    counts = await get_aggregate(db, challenge_id) or AggregateCounts()
    ranking = list(attempt.ranking_json)
    exact_matches = counts.exact_ranking_counts.get(canonical_ranking_key(ranking), 0)
    top_pick_matches = counts.top_pick_counts.get(ranking[0], 0) if ranking else 0

    return ResultsOutSchema(
        challenge_id=challenge.id,
        attempt=BestAttemptSchema(
            id=attempt.id,
            ranking=ranking,
            score=attempt.score_numeric,
            grade=attempt.grade_tier,
            date_key=attempt.date_key,
        ),
        options=[OptionRevealSchema.model_validate(o) for o in challenge.options],
        stats=PopulationStatsSchema(
            percentile=counts.percentile_of(attempt.score_numeric),
            exact_match_percent=counts.share_percent(exact_matches),
            top_pick_percent=counts.share_percent(top_pick_matches),
            total_attempts=counts.best_attempt_count,
            grade_distribution=grade_distribution(counts, config),
        ),
    )


async def build_challenge_stats(db: AsyncSession, challenge_id: str) -> ChallengeStatsOutSchema:
    challenge = await get_challenge(db, challenge_id)
    counts = await get_aggregate(db, challenge_id) or AggregateCounts()

    def _stats(source: dict[str, int]) -> list[OptionStatSchema]:
        return [
            OptionStatSchema(
                option_id=o.id,
                option_text=o.option_text,
                count=source.get(o.id, 0),
                percentage=counts.share_percent(source.get(o.id, 0)),
            )
            for o in challenge.options
        ]

    return ChallengeStatsOutSchema(
        challenge_id=challenge.id,
        challenge_title=challenge.title,
        total_attempts=counts.best_attempt_count,
        top_pick_stats=_stats(counts.top_pick_counts),
        top_two_stats=_stats(counts.top_two_counts),
    )
