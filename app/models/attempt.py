"""Attempt model: one scored ranking submitted by one user for one challenge."""
import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from app.db.session import Base


class Attempt(Base):
    __tablename__ = "attempts"
    __table_args__ = (
        Index("ix_attempts_user_challenge", "user_id", "challenge_id"),
        # at most one best attempt per (user, challenge)
        Index(
            "uq_attempts_one_best_per_user_challenge",
            "user_id",
            "challenge_id",
            unique=True,
            sqlite_where=text("is_best_attempt = 1"),
            postgresql_where=text("is_best_attempt"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(255), nullable=False)  # opaque id from the auth service
    challenge_id = Column(String(36), ForeignKey("challenges.id"), nullable=False, index=True)
    date_key = Column(String(10), nullable=True)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ranking_json = Column(JSON, nullable=False)  # ordered list of option ids
    score_numeric = Column(Integer, nullable=False)
    grade_tier = Column(String(20), nullable=False)
    is_best_attempt = Column(Boolean, nullable=False, default=False)

    challenge = relationship("Challenge")
