"""
Pydantic schemas for reading goals
"""
from pydantic import Field
from typing import Optional
from datetime import datetime

from app.schemas.base import CamelModel


class GoalCreate(CamelModel):
    """Schema for creating a goal; unset targets fall back to the defaults"""
    total_pages: Optional[int] = Field(None, ge=1, description="Pages in the goal")
    daily_target: Optional[int] = Field(None, ge=1, description="Pages per day")
    weekly_target: Optional[int] = Field(None, ge=1, description="Pages per week")
    is_active: bool = True


class GoalUpdate(CamelModel):
    """Partial goal update"""
    total_pages: Optional[int] = Field(None, ge=1)
    daily_target: Optional[int] = Field(None, ge=1)
    weekly_target: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class GoalResponse(CamelModel):
    """Stored goal"""
    id: int
    user_id: int
    total_pages: int
    daily_target: int
    weekly_target: int
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class ActiveGoalResponse(GoalResponse):
    """Active goal with progress against it"""
    completion_percentage: int
    weekly_target_completion: int
