"""Challenge and its four ranked options."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Challenge(Base):
    __tablename__ = "challenges"

    id = Column(String(36), primary_key=True, default=_uuid)
    date_key = Column(String(10), unique=True, nullable=False, index=True)  # YYYY-MM-DD
    title = Column(String(255), nullable=False)
    scenario_text = Column(Text, nullable=False)
    assumptions = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False)
    difficulty = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    options = relationship(
        "ChallengeOption",
        back_populates="challenge",
        order_by="ChallengeOption.ordering_index",
        cascade="all, delete-orphan",
    )
    aggregate = relationship("Aggregate", back_populates="challenge", uselist=False, cascade="all, delete-orphan")


class ChallengeOption(Base):
    __tablename__ = "challenge_options"
    __table_args__ = (
        UniqueConstraint("challenge_id", "ordering_index", name="uq_challenge_options_challenge_ordering"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    challenge_id = Column(String(36), ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    option_text = Column(Text, nullable=False)
    tier_label = Column(String(20), nullable=False)  # Optimal | Reasonable | Risky
    explanation_short = Column(Text, nullable=False)
    ordering_index = Column(Integer, nullable=False)  # 1..4, position in the ideal ranking

    challenge = relationship("Challenge", back_populates="options")
