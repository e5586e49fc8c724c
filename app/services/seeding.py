"""Seed demo challenges on an empty database."""
import logging
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.challenge import Challenge
from app.schemas.challenge import ChallengeCreateSchema
from app.services.challenges import create_challenge

logger = logging.getLogger(__name__)

# (days before today, challenge data without date_key)
SEED_CHALLENGES = [
    (0, {
        "title": "Windfall: $10,000 Bonus",
        "scenario_text": "You just received a $10,000 unexpected bonus at work. You have some financial goals in progress.",
        "assumptions": "You have $2k in credit card debt at 22% APR, a 1-month emergency fund, "
                       "and you want to buy a house in 3 years.",
        "category": "Windfall",
        "difficulty": 1,
        "options": [
            {"option_text": "Pay off the $2k credit card debt completely", "tier_label": "Optimal",
             "explanation_short": "A guaranteed 22% return. Kill high-interest debt first.", "ordering_index": 1},
            {"option_text": "Boost the emergency fund by $5,000", "tier_label": "Optimal",
             "explanation_short": "3-6 months of expenses comes before aggressive investing.", "ordering_index": 2},
            {"option_text": "Put $3,000 into a high-yield savings account for the house", "tier_label": "Reasonable",
             "explanation_short": "Good goal, but debt and the safety net come first.", "ordering_index": 3},
            {"option_text": "Invest all $10,000 in a tech stock ETF", "tier_label": "Risky",
             "explanation_short": "Expected returns won't beat 22% interest, and there is no safety net.",
             "ordering_index": 4},
        ],
    }),
    (1, {
        "title": "Subscription Audit",
        "scenario_text": "You are trying to cut $100/mo from your budget. Which cut makes the most sense?",
        "assumptions": "You use the gym 2x/week, watch Netflix daily, haven't used Audible in 3 months "
                       "and order takeout 4x/week.",
        "category": "Budgeting",
        "difficulty": 1,
        "options": [
            {"option_text": "Cancel Audible and reduce takeout", "tier_label": "Optimal",
             "explanation_short": "Cut what you don't use and trim high-cost conveniences.", "ordering_index": 1},
            {"option_text": "Switch to a cheaper phone plan and cancel Audible", "tier_label": "Optimal",
             "explanation_short": "Lower fixed costs without lifestyle impact.", "ordering_index": 2},
            {"option_text": "Cancel Netflix", "tier_label": "Reasonable",
             "explanation_short": "A luxury, but daily use makes the cost per hour low.", "ordering_index": 3},
            {"option_text": "Cancel the gym membership", "tier_label": "Risky",
             "explanation_short": "Used twice a week, it is high value.", "ordering_index": 4},
        ],
    }),
]


async def seed_challenges(db: AsyncSession, today: date | None = None) -> int:
    """Insert demo challenges if there are none; returns how many were added."""
    result = await db.execute(select(func.count(Challenge.id)))
    if result.scalar_one() > 0:
        return 0

    today = today or date.today()
    for days_back, data in SEED_CHALLENGES:
        date_key = (today - timedelta(days=days_back)).isoformat()
        await create_challenge(db, ChallengeCreateSchema(date_key=date_key, **data))
    await db.commit()
    logger.info("Seeded %d demo challenges", len(SEED_CHALLENGES))
    return len(SEED_CHALLENGES)
