"""
Tests for the sync manager's scheduling and sync bookkeeping
"""
from datetime import timedelta

import pytest

from recruitos.core.utils import utcnow
from recruitos.models.schemas import DatabaseConfig, DatabaseConfigUpdate
from recruitos.services.sync import SYNC_INTERVALS, SYNC_JOB_ID, SyncManager


@pytest.fixture
async def make_manager(mem_storage, tmp_path):
    """Managers built here are shut down while the test's event loop is still running"""
    managers = []

    def make(**config):
        config.setdefault("database_url", f"sqlite+aiosqlite:///{tmp_path / 'external.db'}")
        manager = SyncManager(mem_storage, DatabaseConfig(**config))
        managers.append(manager)
        return manager

    yield make
    for manager in managers:
        manager.shutdown()


def test_intervals():
    assert SYNC_INTERVALS == {"15min": 15, "1hour": 60, "daily": 1440, "manual": 0}


class TestScheduling:

    async def test_initialize_schedules_job(self, make_manager):
        manager = make_manager(auto_sync=True, sync_frequency="15min")

        manager.initialize()

        assert manager.is_scheduled
        next_sync = manager.next_sync_time()
        expected = utcnow() + timedelta(minutes=15)
        assert abs(next_sync - expected) < timedelta(minutes=1)

    async def test_initialize_without_url_does_nothing(self, make_manager):
        manager = make_manager(database_url="", auto_sync=True)

        manager.initialize()

        assert not manager.is_scheduled

    async def test_manual_frequency_never_schedules(self, make_manager):
        manager = make_manager(auto_sync=True, sync_frequency="manual")

        manager.initialize()

        assert not manager.is_scheduled
        assert manager.next_sync_time() is None

    async def test_update_config_reschedules(self, make_manager):
        manager = make_manager(auto_sync=False, sync_frequency="1hour")
        manager.initialize()
        assert not manager.is_scheduled

        manager.update_config(DatabaseConfigUpdate(auto_sync=True))
        assert manager.is_scheduled
        assert manager._scheduler.get_job(SYNC_JOB_ID).trigger.interval == timedelta(hours=1)

        manager.update_config(DatabaseConfigUpdate(sync_frequency="daily"))
        assert manager._scheduler.get_job(SYNC_JOB_ID).trigger.interval == timedelta(days=1)

        manager.update_config(DatabaseConfigUpdate(auto_sync=False))
        assert not manager.is_scheduled
        assert manager.next_sync_time() is None

    async def test_shutdown_stops_scheduler(self, make_manager):
        manager = make_manager(auto_sync=True, sync_frequency="15min")
        manager.initialize()

        manager.shutdown()

        assert not manager.is_scheduled


class TestPerformSync:

    async def test_success_records_last_sync(self, make_manager, mem_storage):
        manager = make_manager(auto_sync=False)

        status = await manager.perform_sync()

        assert status.is_connected
        stats = await mem_storage.get_dashboard_stats()
        assert stats.sync_status == "synced"
        assert stats.last_sync == status.last_sync
        assert manager.get_sync_status().error is None

    async def test_failure_marks_error(self, make_manager, mem_storage):
        manager = make_manager(database_url="", auto_sync=False)

        status = await manager.perform_sync()

        assert not status.is_connected
        assert status.error == "No database URL configured"
        assert (await mem_storage.get_dashboard_stats()).sync_status == "error"
        assert manager.get_sync_status().error == "No database URL configured"

    async def test_recovers_after_failure(self, make_manager, mem_storage, tmp_path):
        manager = make_manager(database_url="", auto_sync=False)
        await manager.perform_sync()

        url = f"sqlite+aiosqlite:///{tmp_path / 'recovered.db'}"
        manager.update_config(DatabaseConfigUpdate(database_url=url))
        status = await manager.perform_sync()

        assert status.is_connected
        assert manager.get_sync_status().is_connected
        assert (await mem_storage.get_dashboard_stats()).sync_status == "synced"

    async def test_overlapping_sync_is_skipped(self, make_manager, mem_storage):
        manager = make_manager(auto_sync=False)
        before = await mem_storage.get_dashboard_stats()
        manager._sync_in_progress = True

        await manager.perform_sync()

        after = await mem_storage.get_dashboard_stats()
        assert after.sync_status == before.sync_status
        assert after.last_sync == before.last_sync
