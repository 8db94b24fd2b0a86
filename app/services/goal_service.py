"""
Reading goal lifecycle

A user has at most one active goal. Activation is a single transition
handled by the store: the candidate becomes active and every sibling is
deactivated in the same atomic step. Superseded goals stay as history.
"""
import logging
from typing import Any, Dict, Optional

from app.config import settings
from app.services.storage import ReadingStore
from app.utils.quran import TOTAL_PAGES

logger = logging.getLogger(__name__)


class GoalService:
    """Service for creating, activating and seeding reading goals"""

    def default_goal_fields(self) -> Dict[str, Any]:
        return {
            "total_pages": TOTAL_PAGES,
            "daily_target": settings.DEFAULT_DAILY_TARGET,
            "weekly_target": settings.DEFAULT_WEEKLY_TARGET,
            "is_active": True,
        }

    def create_goal(self, store: ReadingStore, user_id: int, fields: Dict[str, Any]):
        """
        Create a goal, filling unset targets from the defaults

        Args:
            store: Reading store
            user_id: Owning user
            fields: Goal fields (total_pages, daily_target, weekly_target, is_active)

        Returns:
            Persisted goal
        """
        values = self.default_goal_fields()
        values.update({k: v for k, v in fields.items() if v is not None})

        goal = store.create_goal(user_id, values)
        logger.info(f"Goal {goal.id} created for user {user_id} (active={goal.is_active})")
        return goal

    def update_goal(self, store: ReadingStore, goal_id: int, fields: Dict[str, Any]):
        """Apply a partial update; returns None when the goal does not exist"""
        changes = {k: v for k, v in fields.items() if v is not None}
        goal = store.update_goal(goal_id, changes)

        if goal is None:
            logger.warning(f"Goal {goal_id} not found")
        elif changes.get("is_active"):
            logger.info(f"Goal {goal_id} activated for user {goal.user_id}")
        return goal

    def ensure_default_goal(self, store: ReadingStore, user_id: int) -> Optional[Any]:
        """Create the default goal when the user has no active goal"""
        if store.get_active_goal(user_id) is not None:
            return None
        return self.create_goal(store, user_id, {})


# Global instance
goal_service = GoalService()
