"""
Default data seeding and the "clear all data" reset
"""
import logging
from datetime import date, timedelta
from typing import Optional

from app.services.goal_service import goal_service
from app.services.storage import ReadingStore
from app.utils.quran import TOTAL_JUZ, juz_range, wrap_end_page

logger = logging.getLogger(__name__)


class DataService:
    """Service for initializing and resetting a user's data"""

    SAMPLE_DAYS = 30
    TODAY_SAMPLE_JUZ = 5
    TODAY_SAMPLE_PAGES = 12

    def initialize_default_data(
        self,
        store: ReadingStore,
        user_id: int,
        with_samples: bool = False,
        today: Optional[date] = None
    ) -> None:
        """
        Make sure the user has an active goal, and optionally sample logs

        Sample logs are only added to an empty history.
        """
        if goal_service.ensure_default_goal(store, user_id) is not None:
            logger.info(f"Default goal created for user {user_id}")

        if with_samples and not store.get_recent_logs(user_id, 1):
            count = self.seed_sample_logs(store, user_id, today)
            logger.info(f"Seeded {count} sample log(s) for user {user_id}")

    def seed_sample_logs(self, store: ReadingStore, user_id: int, today: Optional[date] = None) -> int:
        """
        Add a month of sample sessions

        Every fifth day is skipped to leave gaps in the calendar.
        """
        today = today or date.today()
        count = 0

        for days_ago in range(self.SAMPLE_DAYS, 0, -1):
            if days_ago % 5 == 0:
                continue

            juz_number = min(days_ago // 3 + 1, TOTAL_JUZ)
            pages_read = 3 + days_ago % 5
            self._add_sample(store, user_id, today - timedelta(days=days_ago), juz_number, pages_read)
            count += 1

        self._add_sample(store, user_id, today, self.TODAY_SAMPLE_JUZ, self.TODAY_SAMPLE_PAGES)
        return count + 1

    def _add_sample(self, store: ReadingStore, user_id: int, day: date, juz_number: int, pages_read: int):
        start_page = juz_range(juz_number).start
        store.append_log(user_id, {
            "date": day,
            "juz_number": juz_number,
            "pages_read": pages_read,
            "start_page": start_page,
            "end_page": wrap_end_page(start_page, pages_read),
        })

    def clear_all_data(self, store: ReadingStore, user_id: int, cache=None) -> None:
        """
        Wipe the user's logs and goals, then reseed one default goal
        """
        store.clear_user_data(user_id)
        if cache is not None:
            cache.clear_log_snapshot(user_id)

        goal_service.ensure_default_goal(store, user_id)
        logger.info(f"All reading data cleared for user {user_id}")


# Global instance
data_service = DataService()
