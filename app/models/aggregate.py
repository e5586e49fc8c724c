"""Per-challenge population counters over best attempts."""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base


class Aggregate(Base):
    __tablename__ = "aggregates"

    challenge_id = Column(String(36), ForeignKey("challenges.id", ondelete="CASCADE"), primary_key=True)
    best_attempt_count = Column(Integer, nullable=False, default=0)
    # option id -> count
    top_pick_counts_json = Column(JSON, nullable=False, default=dict)
    top_two_counts_json = Column(JSON, nullable=False, default=dict)
    # "id1,id2,id3,id4" -> count
    exact_ranking_counts_json = Column(JSON, nullable=False, default=dict)
    # "score" -> count (JSON object keys are strings)
    score_histogram_json = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    challenge = relationship("Challenge", back_populates="aggregate")
