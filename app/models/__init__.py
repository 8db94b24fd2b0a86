"""
Database models package
"""
from app.models.reading_log import ReadingLog
from app.models.reading_goal import ReadingGoal

__all__ = ["ReadingLog", "ReadingGoal"]
