"""
Khatma and juz completion engine
Derives overall progress and the current-khatma juz map from a log history
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from app.services.storage import ReadingEntry, oldest_first
from app.utils.math_utils import percentage
from app.utils.quran import (
    TOTAL_JUZ,
    TOTAL_PAGES,
    iter_pages,
    juz_for_page,
    juz_range,
    span_length,
    wrap_end_page,
)

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"
STATUS_PARTIAL = "partial"
STATUS_NOT_STARTED = "not-started"


@dataclass(frozen=True)
class JuzMapItem:
    """Completion of one juz within the current khatma"""
    juz_number: int
    status: str
    pages_read: int
    total_pages: int
    percent_complete: int


class CompletionService:
    """
    Service for khatma accounting and per-juz completion

    Algorithm for the current-khatma juz map:
    - pages_in_current_khatma = total pages read mod 604
    - Walk logs oldest-first, consuming that page budget; the log that
      overflows the budget is truncated to what remains
    - Every page of every consumed log is attributed to its juz, using a
      set per juz so overlapping sessions count a page once
    """

    def total_pages_read(self, entries: Sequence[ReadingEntry]) -> int:
        return sum(e.pages_read for e in entries)

    def total_khatmas(self, entries: Sequence[ReadingEntry]) -> int:
        return self.total_pages_read(entries) // TOTAL_PAGES

    def page_span(self, entry: ReadingEntry, pages: Optional[int] = None) -> Tuple[int, int]:
        """
        Start page and page count covered by a log

        Args:
            entry: Reading log
            pages: Truncated page count; when given, the span is that many
                pages from the start page and any explicit end page is ignored

        An explicit range wider than pages_read is capped at pages_read.

        Returns:
            Tuple of (start_page, page_count)
        """
        # Without an explicit start the session is assumed to begin at its juz
        start = entry.start_page or juz_range(entry.juz_number).start

        if pages is not None:
            return start, pages

        end = entry.end_page or wrap_end_page(start, entry.pages_read)
        # A stored range never covers more than the pages logged
        return start, min(span_length(start, end), entry.pages_read)

    def current_khatma_slices(self, entries: Sequence[ReadingEntry]) -> List[Tuple[ReadingEntry, int]]:
        """
        Logs that make up the in-progress khatma

        Returns:
            List of (entry, pages_taken) oldest first; pages_taken is below
            entry.pages_read only for the single truncated log
        """
        budget = self.total_pages_read(entries) % TOTAL_PAGES

        slices = []
        for entry in oldest_first(list(entries)):
            if budget <= 0:
                break
            taken = min(entry.pages_read, budget)
            slices.append((entry, taken))
            budget -= taken

        return slices

    def pages_by_juz(self, entries: Sequence[ReadingEntry]) -> Dict[int, Set[int]]:
        """Pages read per juz in the current khatma"""
        juz_pages: Dict[int, Set[int]] = {n: set() for n in range(1, TOTAL_JUZ + 1)}

        for entry, taken in self.current_khatma_slices(entries):
            truncated = taken if taken < entry.pages_read else None
            start, count = self.page_span(entry, truncated)
            for page in iter_pages(start, count):
                juz_pages[juz_for_page(page)].add(page)

        return juz_pages

    def get_juz_map(self, entries: Sequence[ReadingEntry]) -> List[JuzMapItem]:
        """
        Build the 30-entry juz map for the current khatma

        Args:
            entries: Complete log history of one user

        Returns:
            JuzMapItem list ordered by juz number
        """
        juz_pages = self.pages_by_juz(entries)

        juz_map = []
        for juz_number in range(1, TOTAL_JUZ + 1):
            total = juz_range(juz_number).size
            pages_read = len(juz_pages[juz_number])

            if pages_read >= total:
                status = STATUS_COMPLETED
            elif pages_read > 0:
                status = STATUS_PARTIAL
            else:
                status = STATUS_NOT_STARTED

            juz_map.append(JuzMapItem(
                juz_number=juz_number,
                status=status,
                pages_read=pages_read,
                total_pages=total,
                percent_complete=percentage(pages_read, total)
            ))

        completed = sum(1 for item in juz_map if item.status == STATUS_COMPLETED)
        logger.debug(f"Juz map computed from {len(entries)} log(s): {completed} juz completed")

        return juz_map

    def get_juz_completion(self, entries: Sequence[ReadingEntry]) -> List[Dict[str, object]]:
        """Simplified completed/not-completed view of the juz map"""
        return [
            {"juz_number": item.juz_number, "completed": item.status == STATUS_COMPLETED}
            for item in self.get_juz_map(entries)
        ]

    def completed_juz_count(self, entries: Sequence[ReadingEntry]) -> int:
        return sum(1 for item in self.get_juz_map(entries) if item.status == STATUS_COMPLETED)


# Global instance
completion_service = CompletionService()
