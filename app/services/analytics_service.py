"""
Analytics service composing the progress and streak engines
"""
import logging
from dataclasses import asdict
from datetime import date, timedelta
from typing import Dict, List, Any, Optional

from app.config import settings
from app.services.completion_service import completion_service
from app.services.storage import LogSource
from app.services.streak_service import streak_service
from app.utils.math_utils import percentage

logger = logging.getLogger(__name__)


def heatmap_intensity(pages_read: int) -> float:
    """Color intensity of a calendar cell by pages read that day"""
    if pages_read <= 0:
        return 0.0
    if pages_read <= 3:
        return 0.3
    if pages_read <= 6:
        return 0.5
    if pages_read <= 10:
        return 0.7
    if pages_read <= 15:
        return 0.9
    return 1.0


def start_of_week(day: date) -> date:
    """Sunday on or before `day`"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


class AnalyticsService:
    """Service for reading statistics derived from a user's log history"""

    def get_stats(self, source: LogSource, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Get headline reading statistics for a user

        Args:
            source: Log source to read the history from
            user_id: User id
            today: Reference date for streaks (defaults to the current date)

        Returns:
            Dictionary with stats metrics
        """
        today = today or date.today()
        entries = source.get_logs(user_id)

        stats = {
            "total_pages_read": completion_service.total_pages_read(entries),
            "total_khatmas": completion_service.total_khatmas(entries),
            "completed_juz": completion_service.completed_juz_count(entries),
            "current_streak": streak_service.current_streak(entries, today),
            "longest_streak": streak_service.longest_streak(entries),
            "consistency": streak_service.consistency_percentage(
                entries, settings.CONSISTENCY_WINDOW_DAYS, today
            ),
        }

        logger.info(
            f"Stats for user {user_id}: pages={stats['total_pages_read']}, "
            f"khatmas={stats['total_khatmas']}, streak={stats['current_streak']}"
        )

        return stats

    def get_juz_map(self, source: LogSource, user_id: int) -> List[Dict[str, Any]]:
        """Current-khatma juz map as plain dictionaries"""
        entries = source.get_logs(user_id)
        return [asdict(item) for item in completion_service.get_juz_map(entries)]

    def get_juz_completion(self, source: LogSource, user_id: int) -> List[Dict[str, Any]]:
        return completion_service.get_juz_completion(source.get_logs(user_id))

    def get_goal_progress(
        self,
        source: LogSource,
        user_id: int,
        goal,
        today: Optional[date] = None
    ) -> Dict[str, int]:
        """
        Progress against a goal

        Returns:
            completion_percentage: lifetime pages read over goal.total_pages
            weekly_target_completion: pages logged since Sunday over goal.weekly_target
        """
        today = today or date.today()
        entries = source.get_logs(user_id)
        total_pages = completion_service.total_pages_read(entries)

        week_start = start_of_week(today)
        weekly_pages = sum(e.pages_read for e in entries if week_start <= e.date <= today)

        return {
            "completion_percentage": percentage(total_pages, goal.total_pages),
            "weekly_target_completion": percentage(weekly_pages, goal.weekly_target),
        }

    def get_calendar(
        self,
        source: LogSource,
        user_id: int,
        days: int,
        today: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """
        Per-day pages read for the trailing `days` days, oldest first
        """
        today = today or date.today()
        window_start = today - timedelta(days=days - 1)

        pages_per_day: Dict[date, int] = {}
        for entry in source.get_logs_in_range(user_id, window_start, today):
            pages_per_day[entry.date] = pages_per_day.get(entry.date, 0) + entry.pages_read

        calendar = []
        for offset in range(days):
            day = window_start + timedelta(days=offset)
            pages = pages_per_day.get(day, 0)
            calendar.append({
                "date": day,
                "pages_read": pages,
                "intensity": heatmap_intensity(pages)
            })

        return calendar


# Global instance
analytics_service = AnalyticsService()
