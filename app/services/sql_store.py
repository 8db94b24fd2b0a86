"""
SQLAlchemy-backed reading store
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models import ReadingLog, ReadingGoal
from app.services.storage import ReadingStore, ReadingEntry

logger = logging.getLogger(__name__)


class SqlReadingStore(ReadingStore):
    """Reading store over a request-scoped database session"""

    def __init__(self, db: Session):
        self.db = db

    def _user_logs(self, user_id: int):
        return self.db.query(ReadingLog).filter(ReadingLog.user_id == user_id)

    def get_logs(self, user_id: int) -> List[ReadingEntry]:
        logs = self._user_logs(user_id).order_by(
            ReadingLog.date.desc(),
            ReadingLog.created_at.desc(),
            ReadingLog.id.desc()
        ).all()
        return [ReadingEntry.from_model(log) for log in logs]

    def get_recent_logs(self, user_id: int, limit: int) -> List[ReadingEntry]:
        logs = self._user_logs(user_id).order_by(
            ReadingLog.date.desc(),
            ReadingLog.created_at.desc(),
            ReadingLog.id.desc()
        ).limit(limit).all()
        return [ReadingEntry.from_model(log) for log in logs]

    def get_logs_in_range(self, user_id: int, start_date: date, end_date: date) -> List[ReadingEntry]:
        logs = self._user_logs(user_id).filter(
            ReadingLog.date >= start_date,
            ReadingLog.date <= end_date
        ).order_by(
            ReadingLog.date.asc(),
            ReadingLog.created_at.asc(),
            ReadingLog.id.asc()
        ).all()
        return [ReadingEntry.from_model(log) for log in logs]

    def get_logs_by_juz(self, user_id: int, juz_number: int) -> List[ReadingEntry]:
        logs = self._user_logs(user_id).filter(
            ReadingLog.juz_number == juz_number
        ).order_by(
            ReadingLog.date.desc(),
            ReadingLog.created_at.desc(),
            ReadingLog.id.desc()
        ).all()
        return [ReadingEntry.from_model(log) for log in logs]

    def append_log(self, user_id: int, fields: Dict[str, Any]) -> ReadingEntry:
        log = ReadingLog(user_id=user_id, **fields)
        try:
            self.db.add(log)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(log)
        return ReadingEntry.from_model(log)

    def get_active_goal(self, user_id: int) -> Optional[ReadingGoal]:
        return self.db.query(ReadingGoal).filter(
            ReadingGoal.user_id == user_id,
            ReadingGoal.is_active.is_(True)
        ).order_by(ReadingGoal.id.desc()).first()

    def _deactivate_siblings(self, user_id: int, keep_id: Optional[int] = None) -> int:
        query = self.db.query(ReadingGoal).filter(
            ReadingGoal.user_id == user_id,
            ReadingGoal.is_active.is_(True)
        )
        if keep_id is not None:
            query = query.filter(ReadingGoal.id != keep_id)
        return query.update({ReadingGoal.is_active: False}, synchronize_session="fetch")

    def create_goal(self, user_id: int, fields: Dict[str, Any]) -> ReadingGoal:
        goal = ReadingGoal(user_id=user_id, **fields)
        if goal.is_active is None:
            goal.is_active = True

        # Deactivation and insert commit together or not at all
        try:
            if goal.is_active:
                deactivated = self._deactivate_siblings(user_id)
                logger.info(f"Deactivated {deactivated} goal(s) for user {user_id}")
            self.db.add(goal)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(goal)
        return goal

    def update_goal(self, goal_id: int, fields: Dict[str, Any]) -> Optional[ReadingGoal]:
        goal = self.db.query(ReadingGoal).filter(ReadingGoal.id == goal_id).first()
        if not goal:
            return None

        try:
            if fields.get("is_active"):
                self._deactivate_siblings(goal.user_id, keep_id=goal_id)
            for key, value in fields.items():
                setattr(goal, key, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(goal)
        return goal

    def clear_user_data(self, user_id: int) -> None:
        try:
            deleted_logs = self._user_logs(user_id).delete(synchronize_session=False)
            deleted_goals = self.db.query(ReadingGoal).filter(
                ReadingGoal.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Cleared {deleted_logs} log(s) and {deleted_goals} goal(s) for user {user_id}")
