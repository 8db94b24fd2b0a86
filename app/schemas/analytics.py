"""
Pydantic schemas for analytics endpoints
"""
from pydantic import Field
from typing import Literal
import datetime as dt

from app.schemas.base import CamelModel


class ReadingStats(CamelModel):
    """Headline reading statistics"""
    total_pages_read: int
    total_khatmas: int
    completed_juz: int
    current_streak: int
    longest_streak: int
    consistency: int = Field(..., ge=0, le=100)


class JuzMapItem(CamelModel):
    """Completion of one juz in the current khatma"""
    juz_number: int
    status: Literal["completed", "partial", "not-started"]
    pages_read: int
    total_pages: int
    percent_complete: int = Field(..., ge=0, le=100)


class JuzCompletion(CamelModel):
    """Simplified juz completion flag"""
    juz_number: int
    completed: bool


class CalendarDay(CamelModel):
    """Pages read on one calendar day"""
    date: dt.date
    pages_read: int
    intensity: float


class MessageResponse(CamelModel):
    message: str
