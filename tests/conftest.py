import pytest

from app.core.config import Settings
from app.db.base import Base
from app.db.session import make_engine, make_session_factory
from app.schemas.challenge import ChallengeCreateSchema
from app.services.attempts import AttemptService
from app.services.challenges import create_challenge, ideal_ranking


def make_challenge_data(date_key: str = "2026-03-01", title: str = "Windfall") -> ChallengeCreateSchema:
    tiers = ["Optimal", "Optimal", "Reasonable", "Risky"]
    return ChallengeCreateSchema(
        date_key=date_key,
        title=title,
        scenario_text="You received a bonus.",
        assumptions="Some debt, small emergency fund.",
        category="Windfall",
        difficulty=1,
        options=[
            {
                "option_text": f"Option {i}",
                "tier_label": tiers[i - 1],
                "explanation_short": f"Why option {i}",
                "ordering_index": i,
            }
            for i in (1, 2, 3, 4)
        ],
    )


@pytest.fixture
def settings():
    return Settings(_env_file=None, seed_demo_data=False)


@pytest.fixture
async def engine(tmp_path):
    eng = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def challenge(db):
    created = await create_challenge(db, make_challenge_data())
    await db.commit()
    return created


@pytest.fixture
def ideal(challenge):
    """Option ids [O1, O2, O3, O4] in ideal order."""
    return ideal_ranking(challenge.options)


@pytest.fixture
def service(session_factory, settings):
    return AttemptService(session_factory, settings)
