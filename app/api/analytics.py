"""
Reading analytics API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List
import logging

from app.api.deps import get_log_source, get_user_id
from app.schemas.analytics import ReadingStats, JuzMapItem, JuzCompletion, CalendarDay
from app.services.analytics_service import analytics_service
from app.services.storage import LogSource

router = APIRouter(prefix="/api", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=ReadingStats)
async def get_stats(
    user_id: int = Depends(get_user_id),
    source: LogSource = Depends(get_log_source)
):
    """
    Headline reading statistics

    Returns:
    - Total pages read and completed khatmas
    - Juz completed in the current khatma
    - Current and longest streak
    - 30-day consistency percentage
    """
    try:
        stats = analytics_service.get_stats(source, user_id)
        return ReadingStats(**stats)

    except Exception as e:
        logger.error(f"Failed to fetch stats: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch stats")


@router.get("/juz-map", response_model=List[JuzMapItem])
async def get_juz_map(
    user_id: int = Depends(get_user_id),
    source: LogSource = Depends(get_log_source)
):
    """Per-juz completion for the current khatma (30 entries)"""
    try:
        return [JuzMapItem(**item) for item in analytics_service.get_juz_map(source, user_id)]

    except Exception as e:
        logger.error(f"Failed to fetch juz map: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch juz map")


@router.get("/juz-completion", response_model=List[JuzCompletion])
async def get_juz_completion(
    user_id: int = Depends(get_user_id),
    source: LogSource = Depends(get_log_source)
):
    """Completed flag per juz for the current khatma"""
    try:
        return [JuzCompletion(**item) for item in analytics_service.get_juz_completion(source, user_id)]

    except Exception as e:
        logger.error(f"Failed to fetch juz completion: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch juz completion")


@router.get("/calendar", response_model=List[CalendarDay])
async def get_calendar(
    days: int = Query(30, ge=1, le=366),
    user_id: int = Depends(get_user_id),
    source: LogSource = Depends(get_log_source)
):
    """Pages read per day over the trailing window, oldest first"""
    try:
        return [CalendarDay(**day) for day in analytics_service.get_calendar(source, user_id, days)]

    except Exception as e:
        logger.error(f"Failed to fetch calendar: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch calendar")
