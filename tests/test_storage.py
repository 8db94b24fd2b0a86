"""
Tests for the reading stores, goal activation and the offline snapshot
"""
from datetime import date, timedelta
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from app.services.analytics_service import analytics_service
from app.services.data_service import data_service
from app.services.goal_service import goal_service
from app.services.sql_store import SqlReadingStore
from app.services.storage import (
    FallbackLogSource,
    MemoryReadingStore,
    SnapshotLogSource,
)

TODAY = date(2026, 3, 10)

SAMPLE_LOGS = [
    {"date": TODAY - timedelta(days=3), "juz_number": 1, "pages_read": 604, "start_page": 1, "end_page": 604},
    {"date": TODAY - timedelta(days=2), "juz_number": 1, "pages_read": 21, "start_page": None, "end_page": None},
    {"date": TODAY - timedelta(days=1), "juz_number": 30, "pages_read": 10, "start_page": 600, "end_page": None},
    {"date": TODAY, "juz_number": 2, "pages_read": 5, "start_page": None, "end_page": None},
    {"date": TODAY, "juz_number": 2, "pages_read": 5, "start_page": 30, "end_page": 34},
]


class FakeCache:
    """Dict-backed stand-in for CacheService snapshots"""

    def __init__(self):
        self.snapshots = {}

    def get_log_snapshot(self, user_id):
        return self.snapshots.get(user_id)

    def set_log_snapshot(self, user_id, logs):
        self.snapshots[user_id] = logs
        return True

    def clear_log_snapshot(self, user_id):
        return self.snapshots.pop(user_id, None) is not None


@pytest.fixture(params=["memory", "sql"])
def store(request, db_session):
    if request.param == "memory":
        return MemoryReadingStore()
    return SqlReadingStore(db_session)


class TestLogQueries:
    def test_logs_newest_first(self, store):
        for fields in SAMPLE_LOGS:
            store.append_log(1, fields)

        logs = store.get_logs(1)
        assert [log.date for log in logs] == sorted((f["date"] for f in SAMPLE_LOGS), reverse=True)
        # Same date: most recently created first
        assert logs[0].start_page == 30

    def test_ids_assigned(self, store):
        first = store.append_log(1, SAMPLE_LOGS[1])
        second = store.append_log(1, SAMPLE_LOGS[2])
        assert first.id is not None
        assert second.id != first.id

    def test_recent_and_range_and_juz(self, store):
        for fields in SAMPLE_LOGS:
            store.append_log(1, fields)

        assert len(store.get_recent_logs(1, 2)) == 2

        in_range = store.get_logs_in_range(1, TODAY - timedelta(days=2), TODAY - timedelta(days=1))
        assert [log.date for log in in_range] == [TODAY - timedelta(days=2), TODAY - timedelta(days=1)]

        assert len(store.get_logs_by_juz(1, 2)) == 2

    def test_users_are_isolated(self, store):
        store.append_log(1, SAMPLE_LOGS[1])
        store.append_log(2, SAMPLE_LOGS[2])
        assert len(store.get_logs(1)) == 1
        assert store.get_logs(2)[0].juz_number == 30


class TestGoalActivation:
    def test_only_one_active_goal(self, store):
        first = goal_service.create_goal(store, 1, {})
        second = goal_service.create_goal(store, 1, {"daily_target": 10})

        active = store.get_active_goal(1)
        assert active.id == second.id
        assert active.daily_target == 10
        assert active.weekly_target == 35
        assert first.id != second.id

    def test_inactive_goal_does_not_supersede(self, store):
        first = goal_service.create_goal(store, 1, {})
        goal_service.create_goal(store, 1, {"is_active": False})
        assert store.get_active_goal(1).id == first.id

    def test_reactivation_deactivates_siblings(self, store):
        first = goal_service.create_goal(store, 1, {})
        goal_service.create_goal(store, 1, {})

        updated = goal_service.update_goal(store, first.id, {"is_active": True, "weekly_target": 70})
        assert updated.is_active
        assert store.get_active_goal(1).id == first.id
        assert store.get_active_goal(1).weekly_target == 70

    def test_other_users_goals_untouched(self, store):
        other = goal_service.create_goal(store, 2, {})
        goal_service.create_goal(store, 1, {})
        assert store.get_active_goal(2).id == other.id

    def test_update_missing_goal(self, store):
        assert goal_service.update_goal(store, 999, {"daily_target": 3}) is None

    def test_ensure_default_goal_is_idempotent(self, store):
        assert goal_service.ensure_default_goal(store, 1) is not None
        assert goal_service.ensure_default_goal(store, 1) is None


class TestDataReset:
    def test_clear_all_data_reseeds_default_goal(self, store):
        for fields in SAMPLE_LOGS:
            store.append_log(1, fields)
        goal_service.create_goal(store, 1, {"daily_target": 20})
        cache = FakeCache()
        cache.set_log_snapshot(1, [])

        data_service.clear_all_data(store, 1, cache=cache)

        assert store.get_logs(1) == []
        assert store.get_active_goal(1).daily_target == 5
        assert cache.get_log_snapshot(1) is None

    def test_sample_seeding(self, store):
        data_service.initialize_default_data(store, 1, with_samples=True, today=TODAY)

        logs = store.get_logs(1)
        assert len(logs) == 25
        assert logs[0].date == TODAY
        assert logs[0].pages_read == 12
        assert all(log.end_page >= log.start_page for log in logs)
        assert store.get_active_goal(1) is not None

    def test_samples_not_added_twice(self, store):
        data_service.initialize_default_data(store, 1, with_samples=True, today=TODAY)
        data_service.initialize_default_data(store, 1, with_samples=True, today=TODAY)
        assert len(store.get_logs(1)) == 25


class TestStoreParity:
    def test_sql_and_memory_agree(self, db_session):
        memory = MemoryReadingStore()
        sql = SqlReadingStore(db_session)
        for fields in SAMPLE_LOGS:
            memory.append_log(1, fields)
            sql.append_log(1, fields)

        assert analytics_service.get_stats(memory, 1, TODAY) == analytics_service.get_stats(sql, 1, TODAY)
        assert analytics_service.get_juz_map(memory, 1) == analytics_service.get_juz_map(sql, 1)

    def test_stats_over_sample_history(self):
        memory = MemoryReadingStore()
        for fields in SAMPLE_LOGS:
            memory.append_log(1, fields)

        stats = analytics_service.get_stats(memory, 1, TODAY)
        assert stats["total_pages_read"] == 645
        assert stats["total_khatmas"] == 1
        assert stats["current_streak"] == 4
        assert stats["longest_streak"] == 4


class TestOfflineSnapshot:
    def test_snapshot_round_trip(self):
        memory = MemoryReadingStore()
        for fields in SAMPLE_LOGS:
            memory.append_log(1, fields)

        snapshot = SnapshotLogSource(FakeCache())
        snapshot.store(1, memory.get_logs(1))
        assert snapshot.get_logs(1) == memory.get_logs(1)

    def test_fallback_mirrors_primary(self):
        memory = MemoryReadingStore()
        memory.append_log(1, SAMPLE_LOGS[1])
        cache = FakeCache()

        source = FallbackLogSource(memory, SnapshotLogSource(cache), errors=(OperationalError,))
        assert len(source.get_logs(1)) == 1
        assert len(cache.get_log_snapshot(1)) == 1

    def test_fallback_serves_snapshot_when_primary_fails(self):
        memory = MemoryReadingStore()
        for fields in SAMPLE_LOGS:
            memory.append_log(1, fields)
        cache = FakeCache()
        SnapshotLogSource(cache).store(1, memory.get_logs(1))

        broken = Mock()
        broken.get_logs.side_effect = OperationalError("SELECT", {}, Exception("database is down"))
        source = FallbackLogSource(broken, SnapshotLogSource(cache), errors=(OperationalError,))

        assert analytics_service.get_stats(source, 1, TODAY) == analytics_service.get_stats(memory, 1, TODAY)

    def test_fallback_without_snapshot_is_empty(self):
        broken = Mock()
        broken.get_logs.side_effect = OperationalError("SELECT", {}, Exception("database is down"))
        source = FallbackLogSource(broken, SnapshotLogSource(FakeCache()), errors=(OperationalError,))
        assert source.get_logs(1) == []
