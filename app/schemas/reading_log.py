"""
Pydantic schemas for reading log requests and responses
"""
from pydantic import Field, model_validator
from typing import Optional
import datetime as dt

from app.schemas.base import CamelModel
from app.utils.quran import span_length


class ReadingLogCreate(CamelModel):
    """
    Schema for logging a reading session

    An end_page below start_page means the session wrapped past page 604.
    """
    date: dt.date = Field(default_factory=dt.date.today, description="Calendar date of the session")
    juz_number: int = Field(..., ge=1, le=30, description="Juz the session belongs to (1-30)")
    pages_read: int = Field(..., ge=1, description="Pages read in the session")
    start_page: Optional[int] = Field(None, ge=1, le=604, description="First page read")
    end_page: Optional[int] = Field(None, ge=1, le=604, description="Last page read")

    @model_validator(mode="after")
    def check_page_range(self):
        """An explicit range needs a start page and must cover exactly pages_read pages"""
        if self.end_page is None:
            return self

        if self.start_page is None:
            raise ValueError("endPage requires startPage")

        covered = span_length(self.start_page, self.end_page)
        if covered != self.pages_read:
            raise ValueError(
                f"startPage..endPage covers {covered} page(s) but pagesRead is {self.pages_read}"
            )
        return self


class ReadingLogResponse(CamelModel):
    """Stored reading session"""
    id: int
    user_id: int
    date: dt.date
    juz_number: int
    pages_read: int
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    created_at: dt.datetime
