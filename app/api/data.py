"""
Data reset API endpoint
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from app.api.deps import get_store, get_user_id
from app.schemas.analytics import MessageResponse
from app.services.data_service import data_service
from app.services.storage import ReadingStore
from app.utils.cache import cache_service

router = APIRouter(prefix="/api", tags=["data"])
logger = logging.getLogger(__name__)


@router.post("/clear-data", response_model=MessageResponse)
async def clear_data(
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """Delete all reading logs and goals, then reseed the default goal"""
    try:
        data_service.clear_all_data(store, user_id, cache=cache_service)
    except Exception as e:
        logger.error(f"Failed to clear data: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to clear data")

    return MessageResponse(message="All reading data has been cleared successfully.")
