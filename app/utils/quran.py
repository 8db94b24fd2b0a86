"""
Quran page/juz partition and resolver

The mushaf has 604 pages split into 30 juz of unequal size:
juz 1 has 21 pages, juz 2-29 have 20 pages each and juz 30 has 23.
"""
from dataclasses import dataclass
from typing import Dict, Iterator

TOTAL_PAGES = 604
TOTAL_JUZ = 30

FIRST_JUZ_PAGES = 21
MIDDLE_JUZ_PAGES = 20
LAST_JUZ_START = 582


@dataclass(frozen=True)
class JuzRange:
    """Inclusive page range of one juz"""
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start + 1


def _build_partition() -> Dict[int, JuzRange]:
    partition = {1: JuzRange(1, FIRST_JUZ_PAGES)}
    for juz in range(2, TOTAL_JUZ):
        start = FIRST_JUZ_PAGES + 1 + (juz - 2) * MIDDLE_JUZ_PAGES
        partition[juz] = JuzRange(start, start + MIDDLE_JUZ_PAGES - 1)
    partition[TOTAL_JUZ] = JuzRange(LAST_JUZ_START, TOTAL_PAGES)
    return partition


JUZ_PARTITION: Dict[int, JuzRange] = _build_partition()


def juz_range(juz_number: int) -> JuzRange:
    """
    Page range of a juz

    Raises:
        ValueError: juz_number outside 1-30
    """
    try:
        return JUZ_PARTITION[juz_number]
    except KeyError:
        raise ValueError(f"juz_number must be between 1 and {TOTAL_JUZ}, got {juz_number}")


def juz_for_page(page: int) -> int:
    """
    Juz containing a page

    Raises:
        ValueError: page outside 1-604
    """
    if not 1 <= page <= TOTAL_PAGES:
        raise ValueError(f"page must be between 1 and {TOTAL_PAGES}, got {page}")

    if page <= FIRST_JUZ_PAGES:
        return 1
    if page >= LAST_JUZ_START:
        return TOTAL_JUZ
    return (page - FIRST_JUZ_PAGES - 1) // MIDDLE_JUZ_PAGES + 2


def next_page(page: int) -> int:
    """Page after `page`, continuing from 604 back to 1"""
    return page % TOTAL_PAGES + 1


def wrap_end_page(start_page: int, pages_read: int) -> int:
    """
    Last page of a session of `pages_read` pages starting at `start_page`

    Wraps past page 604 using 1-based modular arithmetic, so the result is
    always within 1-604 (a boundary landing is 604, never 0).
    """
    return (start_page + pages_read - 1 - 1) % TOTAL_PAGES + 1


def span_length(start_page: int, end_page: int) -> int:
    """Number of pages from start to end inclusive, wrapping when end < start"""
    if end_page >= start_page:
        return end_page - start_page + 1
    return TOTAL_PAGES - start_page + 1 + end_page


def iter_pages(start_page: int, count: int) -> Iterator[int]:
    """Yield `count` consecutive page numbers from `start_page` with wraparound"""
    page = start_page
    for _ in range(count):
        yield page
        page = next_page(page)
