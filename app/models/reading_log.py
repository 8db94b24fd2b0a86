"""
ReadingLog model - one logged reading session
"""
from sqlalchemy import Column, Integer, Date, DateTime, Index, func

from app.database import Base


class ReadingLog(Base):
    """
    Reading logs table - append-only history of reading sessions
    """
    __tablename__ = "reading_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    date = Column(Date, nullable=False, server_default=func.current_date())
    juz_number = Column(Integer, nullable=False)
    pages_read = Column(Integer, nullable=False)
    start_page = Column(Integer)  # 1-604, optional
    end_page = Column(Integer)  # may be < start_page when the range wraps past 604
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_reading_logs_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<ReadingLog(id={self.id}, date={self.date}, juz={self.juz_number}, pages={self.pages_read})>"
