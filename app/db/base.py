"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.aggregate import Aggregate  # noqa: F401
from app.models.attempt import Attempt  # noqa: F401
from app.models.challenge import Challenge, ChallengeOption  # noqa: F401
from app.models.streak import Streak  # noqa: F401

__all__ = ["Base", "Challenge", "ChallengeOption", "Attempt", "Aggregate", "Streak"]
