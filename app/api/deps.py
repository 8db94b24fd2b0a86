"""
Shared API dependencies
"""
from fastapi import Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.services.sql_store import SqlReadingStore
from app.services.storage import FallbackLogSource, LogSource, SnapshotLogSource
from app.utils.cache import cache_service


def get_user_id(
    user_id: int = Query(settings.DEFAULT_USER_ID, ge=1, description="Owning user")
) -> int:
    return user_id


def get_store(db: Session = Depends(get_db)) -> SqlReadingStore:
    return SqlReadingStore(db)


def get_log_source(store: SqlReadingStore = Depends(get_store)) -> LogSource:
    """Database-backed log source falling back to the offline snapshot"""
    return FallbackLogSource(
        primary=store,
        snapshot=SnapshotLogSource(cache_service),
        errors=(SQLAlchemyError,)
    )
