"""
RecruitOS - Database Sync Manager
Holds the external database settings and runs the periodic sync job
"""
import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_EXECUTED, EVENT_JOB_ERROR
from sqlalchemy import text

from recruitos.config import get_settings
from recruitos.core.database import build_engine
from recruitos.core.utils import utcnow
from recruitos.models.database_models import SyncState
from recruitos.models.schemas import (
    DatabaseConfig,
    DatabaseConfigUpdate,
    DashboardStatsUpdate,
    SyncStatus
)
from recruitos.services.storage import BaseStorage, get_storage

logger = logging.getLogger(__name__)

SYNC_JOB_ID = "auto_sync_database"

# Minutes between automatic syncs; 0 means manual only
SYNC_INTERVALS = {
    "15min": 15,
    "1hour": 60,
    "daily": 24 * 60,
    "manual": 0,
}


class SyncManager:
    """
    Manages the external database connection settings and the
    background auto-sync job.
    """

    def __init__(self, storage: BaseStorage, config: Optional[DatabaseConfig] = None):
        if config is None:
            settings = get_settings()
            config = DatabaseConfig(
                database_url=settings.database_url,
                auto_sync=settings.auto_sync,
                sync_frequency=settings.sync_frequency
            )
        self.storage = storage
        self._config = config
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._sync_in_progress = False
        self._last_sync: Optional[datetime] = None
        self._last_error: Optional[str] = None

    def _job_listener(self, event):
        """Listen to job events for logging"""
        if event.exception:
            logger.error("[Sync] Job %s failed: %s", event.job_id, event.exception)
        else:
            logger.debug("[Sync] Job %s completed", event.job_id)

    @property
    def interval_minutes(self) -> int:
        return SYNC_INTERVALS[self._config.sync_frequency]

    @property
    def is_scheduled(self) -> bool:
        return bool(self._scheduler and self._scheduler.get_job(SYNC_JOB_ID))

    def _should_schedule(self) -> bool:
        return bool(self._config.auto_sync and self._config.database_url and self.interval_minutes > 0)

    # ============================================
    # Lifecycle
    # ============================================

    def initialize(self):
        """Start auto-sync if a database URL is configured. Call from a running event loop."""
        if not self._config.database_url:
            logger.info("[Sync] No database URL configured, records stay in the local store")
            return

        logger.info("[Sync] Database connection configured")
        if self._should_schedule():
            self._schedule()

    def _schedule(self):
        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()
            self._scheduler.add_listener(self._job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

        self._scheduler.add_job(
            self.perform_sync,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=SYNC_JOB_ID,
            name="Auto Sync to external database",
            replace_existing=True
        )
        if not self._scheduler.running:
            self._scheduler.start()

        logger.info("[Sync] Auto-sync enabled with %s frequency", self._config.sync_frequency)

    def _unschedule(self):
        if self.is_scheduled:
            self._scheduler.remove_job(SYNC_JOB_ID)
            logger.info("[Sync] Auto-sync disabled")

    def shutdown(self):
        """Stop the scheduler"""
        if self._scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("[Sync] Stopped")
        self._scheduler = None

    # ============================================
    # Configuration
    # ============================================

    def get_config(self) -> DatabaseConfig:
        return self._config.model_copy()

    def update_config(self, updates: DatabaseConfigUpdate) -> DatabaseConfig:
        """Merge new settings and reschedule the sync job accordingly"""
        self._config = self._config.model_copy(update=updates.model_dump(exclude_none=True))

        self._unschedule()
        if self._should_schedule():
            self._schedule()

        return self.get_config()

    def next_sync_time(self) -> Optional[datetime]:
        if not self._config.auto_sync or self.interval_minutes == 0:
            return None

        if self.is_scheduled:
            job = self._scheduler.get_job(SYNC_JOB_ID)
            if job.next_run_time:
                return job.next_run_time.astimezone(timezone.utc).replace(tzinfo=None)

        return utcnow() + timedelta(minutes=self.interval_minutes)

    # ============================================
    # Connection & Sync
    # ============================================

    async def test_connection(self) -> SyncStatus:
        """Open the configured database and run a trivial query"""
        if not self._config.database_url:
            return SyncStatus(is_connected=False, error="No database URL configured")

        engine = None
        try:
            engine = build_engine(self._config.database_url)
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("[Sync] Connection test failed: %s", e)
            return SyncStatus(is_connected=False, error=str(e) or "Connection failed")
        finally:
            if engine is not None:
                await engine.dispose()

        return SyncStatus(
            is_connected=True,
            last_sync=self._last_sync,
            next_sync=self.next_sync_time()
        )

    async def perform_sync(self) -> SyncStatus:
        """
        Run one sync pass: mark the dashboard as syncing, verify the
        external database, then record success or failure.
        """
        if self._sync_in_progress:
            logger.info("[Sync] Sync already in progress, skipping...")
            return self.get_sync_status()

        self._sync_in_progress = True
        try:
            logger.info("[Sync] Starting sync at %s", utcnow().isoformat())
            await self.storage.update_dashboard_stats(DashboardStatsUpdate(sync_status=SyncState.SYNCING))

            status = await self.test_connection()
            if status.is_connected:
                self._last_sync = utcnow()
                self._last_error = None
                await self.storage.update_dashboard_stats(
                    DashboardStatsUpdate(sync_status=SyncState.SYNCED, last_sync=self._last_sync)
                )
                logger.info("[Sync] Sync completed")
                status.last_sync = self._last_sync
            else:
                self._last_error = status.error
                await self.storage.update_dashboard_stats(DashboardStatsUpdate(sync_status=SyncState.ERROR))
                logger.error("[Sync] Sync failed: %s", status.error)
            return status
        except Exception as e:
            self._last_error = str(e)
            logger.exception("[Sync] Sync failed")
            await self.storage.update_dashboard_stats(DashboardStatsUpdate(sync_status=SyncState.ERROR))
            return SyncStatus(is_connected=False, last_sync=self._last_sync, error=self._last_error)
        finally:
            self._sync_in_progress = False

    def get_sync_status(self) -> SyncStatus:
        """Current state without touching the database"""
        return SyncStatus(
            is_connected=bool(self._config.database_url) and self._last_error is None,
            last_sync=self._last_sync,
            next_sync=self.next_sync_time(),
            error=self._last_error
        )


@lru_cache()
def get_sync_manager() -> SyncManager:
    """Get the application's sync manager"""
    return SyncManager(get_storage())
