"""
Streak and consistency engine over calendar dates of reading logs
"""
import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional, Set

from app.services.storage import ReadingEntry
from app.utils.math_utils import percentage

logger = logging.getLogger(__name__)


class StreakService:
    """
    Day-level habit metrics

    Logs are grouped by their calendar date; several logs on one day count
    as a single reading day. All metrics are 0 for an empty history.
    """

    # Bound on the backward walk for the current streak
    MAX_STREAK_LOOKBACK_DAYS = 366

    @staticmethod
    def reading_days(entries: Iterable[ReadingEntry]) -> Set[date]:
        return {e.date for e in entries}

    def current_streak(self, entries: Iterable[ReadingEntry], today: Optional[date] = None) -> int:
        """
        Consecutive reading days ending today

        A day without a log today gives 0 even if yesterday was read.
        """
        today = today or date.today()
        days = self.reading_days(entries)

        streak = 0
        for offset in range(self.MAX_STREAK_LOOKBACK_DAYS):
            if today - timedelta(days=offset) not in days:
                break
            streak += 1

        return streak

    def longest_streak(self, entries: Iterable[ReadingEntry]) -> int:
        """Longest run of consecutive reading days anywhere in the history"""
        days: List[date] = sorted(self.reading_days(entries))
        if not days:
            return 0

        longest = 1
        run = 1
        for previous, current in zip(days, days[1:]):
            if (current - previous).days == 1:
                run += 1
            else:
                longest = max(longest, run)
                run = 1

        return max(longest, run)

    def consistency_percentage(
        self,
        entries: Iterable[ReadingEntry],
        days: int,
        today: Optional[date] = None
    ) -> int:
        """
        Share of days with a reading in the trailing window ending today

        Args:
            entries: Log history
            days: Window length, today inclusive
            today: Window end (defaults to the current date)

        Returns:
            Integer percentage 0-100
        """
        if days <= 0:
            return 0

        today = today or date.today()
        window_start = today - timedelta(days=days - 1)
        active = {d for d in self.reading_days(entries) if window_start <= d <= today}

        return percentage(len(active), days)


# Global instance
streak_service = StreakService()
