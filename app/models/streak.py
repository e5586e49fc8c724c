"""Daily completion streak per user."""
from sqlalchemy import Column, Integer, String

from app.db.session import Base


class Streak(Base):
    __tablename__ = "streaks"

    user_id = Column(String(255), primary_key=True)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_completed_date_key = Column(String(10), nullable=True)
