"""
Tests for khatma accounting and the current-khatma juz map
"""
from datetime import date, timedelta

from app.services.completion_service import (
    CompletionService,
    STATUS_COMPLETED,
    STATUS_NOT_STARTED,
    STATUS_PARTIAL,
)

DAY = date(2026, 3, 10)

service = CompletionService()


def by_juz(juz_map):
    return {item.juz_number: item for item in juz_map}


class TestKhatmaAccounting:
    def test_empty_history(self):
        assert service.total_pages_read([]) == 0
        assert service.total_khatmas([]) == 0
        juz_map = service.get_juz_map([])
        assert len(juz_map) == 30
        assert all(item.status == STATUS_NOT_STARTED for item in juz_map)

    def test_khatmas_accumulate(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=1, pages_read=604, start_page=1),
            make_entry(DAY + timedelta(days=1), juz_number=1, pages_read=604, start_page=1),
            make_entry(DAY + timedelta(days=2), juz_number=1, pages_read=10),
        ]
        assert service.total_pages_read(entries) == 1218
        assert service.total_khatmas(entries) == 2

    def test_map_pages_equal_remainder_for_sequential_logs(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=1, pages_read=21),
            make_entry(DAY + timedelta(days=1), juz_number=2, pages_read=20),
            make_entry(DAY + timedelta(days=2), juz_number=3, pages_read=10, start_page=42),
        ]
        juz_map = service.get_juz_map(entries)
        assert sum(item.pages_read for item in juz_map) == 51
        assert service.total_khatmas(entries) == 0

    def test_exact_khatma_resets_map(self, make_entry):
        entries = [make_entry(DAY, juz_number=1, pages_read=604, start_page=1)]
        juz_map = service.get_juz_map(entries)
        assert service.total_khatmas(entries) == 1
        assert all(item.status == STATUS_NOT_STARTED and item.pages_read == 0 for item in juz_map)
        assert service.completed_juz_count(entries) == 0


class TestJuzMap:
    def test_fresh_khatma_first_juz(self, make_entry):
        entries = [make_entry(DAY, juz_number=1, pages_read=21)]
        juz_map = by_juz(service.get_juz_map(entries))

        assert juz_map[1].status == STATUS_COMPLETED
        assert juz_map[1].pages_read == 21
        assert juz_map[1].total_pages == 21
        assert juz_map[1].percent_complete == 100
        assert all(juz_map[n].status == STATUS_NOT_STARTED for n in range(2, 31))
        assert service.total_pages_read(entries) == 21
        assert service.total_khatmas(entries) == 0

    def test_wraparound_session_split_between_last_and_first_juz(self, make_entry):
        entries = [make_entry(DAY, juz_number=30, pages_read=10, start_page=600)]
        juz_map = by_juz(service.get_juz_map(entries))

        assert juz_map[30].pages_read == 5
        assert juz_map[1].pages_read == 5
        assert juz_map[30].status == STATUS_PARTIAL
        assert juz_map[1].percent_complete == 24
        assert juz_map[30].percent_complete == 22

    def test_session_crossing_juz_boundary(self, make_entry):
        entries = [make_entry(DAY, juz_number=1, pages_read=10, start_page=15)]
        juz_map = by_juz(service.get_juz_map(entries))
        assert juz_map[1].pages_read == 7
        assert juz_map[2].pages_read == 3

    def test_explicit_range_is_used(self, make_entry):
        entries = [make_entry(DAY, juz_number=5, pages_read=5, start_page=100, end_page=104)]
        juz_map = by_juz(service.get_juz_map(entries))
        assert juz_map[5].pages_read == 2
        assert juz_map[6].pages_read == 3

    def test_inconsistent_stored_range_capped_at_pages_read(self, make_entry):
        entries = [make_entry(DAY, juz_number=1, pages_read=3, start_page=10, end_page=5)]
        juz_map = by_juz(service.get_juz_map(entries))

        assert sum(item.pages_read for item in juz_map.values()) == 3
        assert juz_map[1].pages_read == 3
        assert service.completed_juz_count(entries) == 0

    def test_end_page_without_start_capped_at_pages_read(self, make_entry):
        entries = [make_entry(DAY, juz_number=5, pages_read=3, end_page=10)]
        juz_map = by_juz(service.get_juz_map(entries))

        assert sum(item.pages_read for item in juz_map.values()) == 3
        assert juz_map[5].pages_read == 3

    def test_derived_range_starts_at_declared_juz(self, make_entry):
        entries = [make_entry(DAY, juz_number=4, pages_read=5)]
        juz_map = by_juz(service.get_juz_map(entries))
        assert juz_map[4].pages_read == 5
        assert service.page_span(entries[0]) == (62, 5)

    def test_duplicate_pages_counted_once(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=3, pages_read=5),
            make_entry(DAY + timedelta(days=1), juz_number=3, pages_read=5),
        ]
        juz_map = by_juz(service.get_juz_map(entries))
        assert juz_map[3].pages_read == 5
        assert service.total_pages_read(entries) == 10

    def test_oldest_log_truncated_after_completed_khatma(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=1, pages_read=604, start_page=1),
            make_entry(DAY + timedelta(days=1), juz_number=10, pages_read=30),
        ]
        slices = service.current_khatma_slices(entries)
        assert [(e.id, taken) for e, taken in slices] == [(entries[0].id, 30)]

        juz_map = by_juz(service.get_juz_map(entries))
        assert juz_map[1].status == STATUS_COMPLETED
        assert juz_map[2].pages_read == 9
        assert sum(item.pages_read for item in juz_map.values()) == 30

    def test_truncated_log_ignores_explicit_end_page(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=1, pages_read=600, start_page=1, end_page=600),
            make_entry(DAY + timedelta(days=1), juz_number=30, pages_read=14, start_page=601, end_page=10),
        ]
        juz_map = by_juz(service.get_juz_map(entries))
        assert juz_map[1].pages_read == 10
        assert sum(item.pages_read for item in juz_map.values()) == 10

    def test_same_date_ordered_by_creation(self, make_entry):
        first = make_entry(DAY, juz_number=1, pages_read=604, start_page=1)
        second = make_entry(DAY, juz_number=30, pages_read=3, start_page=582)
        # Input order must not matter
        slices = service.current_khatma_slices([second, first])
        assert slices[0][0].id == first.id

    def test_status_matches_page_counts(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=1, pages_read=21),
            make_entry(DAY + timedelta(days=1), juz_number=2, pages_read=7),
            make_entry(DAY + timedelta(days=2), juz_number=30, pages_read=23),
        ]
        for item in service.get_juz_map(entries):
            assert (item.status == STATUS_COMPLETED) == (item.pages_read == item.total_pages)
            assert 0 <= item.percent_complete <= 100
        assert service.completed_juz_count(entries) == 2

    def test_juz_completion_view(self, make_entry):
        entries = [make_entry(DAY, juz_number=2, pages_read=20)]
        completion = service.get_juz_completion(entries)
        assert completion[1] == {"juz_number": 2, "completed": True}
        assert sum(1 for item in completion if item["completed"]) == 1

    def test_recomputation_is_identical(self, make_entry):
        entries = [
            make_entry(DAY, juz_number=1, pages_read=604, start_page=1),
            make_entry(DAY + timedelta(days=1), juz_number=30, pages_read=12, start_page=598),
        ]
        assert service.get_juz_map(entries) == service.get_juz_map(list(reversed(entries)))
