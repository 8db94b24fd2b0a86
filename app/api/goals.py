"""
Reading goal API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Path
import logging

from app.api.deps import get_log_source, get_store, get_user_id
from app.schemas.goal import GoalCreate, GoalUpdate, GoalResponse, ActiveGoalResponse
from app.services.analytics_service import analytics_service
from app.services.goal_service import goal_service
from app.services.storage import LogSource, ReadingStore

router = APIRouter(prefix="/api/reading-goals", tags=["reading-goals"])
logger = logging.getLogger(__name__)


@router.get("/active", response_model=ActiveGoalResponse)
async def get_active_goal(
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store),
    source: LogSource = Depends(get_log_source)
):
    """
    Active goal with progress

    - completionPercentage: lifetime pages read against totalPages
    - weeklyTargetCompletion: pages since Sunday against weeklyTarget
    """
    goal = store.get_active_goal(user_id)
    if not goal:
        raise HTTPException(status_code=404, detail="No active reading goal found")

    progress = analytics_service.get_goal_progress(source, user_id, goal)

    return ActiveGoalResponse(
        **GoalResponse.model_validate(goal).model_dump(),
        **progress
    )


@router.post("", response_model=GoalResponse, status_code=201)
async def create_goal(
    goal: GoalCreate,
    user_id: int = Depends(get_user_id),
    store: ReadingStore = Depends(get_store)
):
    """Create a goal; an active goal supersedes the previous one"""
    try:
        created = goal_service.create_goal(store, user_id, goal.model_dump())
    except Exception as e:
        logger.error(f"Failed to create reading goal: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create reading goal")

    return GoalResponse.model_validate(created)


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    update: GoalUpdate,
    goal_id: int = Path(..., ge=1),
    store: ReadingStore = Depends(get_store)
):
    """Update a goal; activating it deactivates the user's other goals"""
    try:
        updated = goal_service.update_goal(store, goal_id, update.model_dump())
    except Exception as e:
        logger.error(f"Failed to update reading goal: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update reading goal")

    if updated is None:
        raise HTTPException(status_code=404, detail="Reading goal not found")

    return GoalResponse.model_validate(updated)
