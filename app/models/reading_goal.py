"""
ReadingGoal model - user reading targets
"""
from sqlalchemy import Column, Integer, Boolean, DateTime, func

from app.database import Base


class ReadingGoal(Base):
    """
    Reading goals table - at most one active goal per user, the rest is history
    """
    __tablename__ = "reading_goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    total_pages = Column(Integer, nullable=False, default=604)
    daily_target = Column(Integer, nullable=False, default=5)
    weekly_target = Column(Integer, nullable=False, default=35)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ReadingGoal(id={self.id}, user_id={self.user_id}, active={self.is_active})>"
