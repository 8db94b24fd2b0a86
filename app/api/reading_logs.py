"""
Reading log API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Path
from typing import List, Optional
from datetime import date
import logging

from app.api.deps import get_store, get_user_id
from app.config import settings
from app.schemas.reading_log import ReadingLogCreate, ReadingLogResponse
from app.services.storage import ReadingStore

router = APIRouter(prefix="/api/reading-logs", tags=["reading-logs"])
logger = logging.getLogger(__name__)

EPOCH = date(1970, 1, 1)


@router.get("", response_model=List[ReadingLogResponse])
async def list_reading_logs(
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """All reading logs, newest first"""
    return store.get_logs(user_id)


@router.get("/recent", response_model=List[ReadingLogResponse])
async def recent_reading_logs(
    limit: int = Query(settings.RECENT_LOGS_LIMIT, ge=1, le=100),
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """Most recent reading logs"""
    return store.get_recent_logs(user_id, limit)


@router.get("/date-range", response_model=List[ReadingLogResponse])
async def reading_logs_in_range(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """
    Reading logs dated between startDate and endDate inclusive, oldest first

    - startDate defaults to 1970-01-01
    - endDate defaults to today
    """
    start_date = start_date or EPOCH
    end_date = end_date or date.today()

    if start_date > end_date:
        raise HTTPException(status_code=400, detail="startDate must be on or before endDate")

    return store.get_logs_in_range(user_id, start_date, end_date)


@router.get("/juz/{juz_number}", response_model=List[ReadingLogResponse])
async def reading_logs_by_juz(
    juz_number: int = Path(..., ge=1, le=30),
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """Reading logs declared against one juz, newest first"""
    return store.get_logs_by_juz(user_id, juz_number)


@router.post("", response_model=ReadingLogResponse, status_code=201)
async def create_reading_log(
    log: ReadingLogCreate,
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """
    Log a reading session

    - juzNumber must be 1-30 and pagesRead at least 1
    - startPage/endPage are optional; without them the range is derived
      from the start of the juz
    """
    try:
        entry = store.append_log(user_id, log.model_dump())
    except Exception as e:
        logger.error(f"Failed to create reading log: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create reading log")

    logger.info(
        f"Reading log created: id={entry.id}, user={user_id}, "
        f"juz={entry.juz_number}, pages={entry.pages_read}"
    )

    return entry
