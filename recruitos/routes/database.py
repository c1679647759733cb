"""
Database Sync API endpoints
External database configuration, connection tests and manual sync
"""
from fastapi import APIRouter, Depends

from recruitos.models.schemas import DatabaseConfig, DatabaseConfigUpdate, MessageResponse, SyncStatus
from recruitos.services.sync import SyncManager, get_sync_manager

router = APIRouter()

MASKED_URL = "***configured***"


def _masked(config: DatabaseConfig) -> DatabaseConfig:
    """Never expose the full database URL"""
    return config.model_copy(update={"database_url": MASKED_URL if config.database_url else ""})


@router.get("/status", response_model=SyncStatus)
async def get_database_status(manager: SyncManager = Depends(get_sync_manager)):
    """Test the external database connection"""
    return await manager.test_connection()


@router.get("/sync-status", response_model=SyncStatus)
async def get_sync_status(manager: SyncManager = Depends(get_sync_manager)):
    """Last sync outcome and next scheduled run, without connecting"""
    return manager.get_sync_status()


@router.get("/config", response_model=DatabaseConfig)
async def get_database_config(manager: SyncManager = Depends(get_sync_manager)):
    """Get the sync configuration"""
    return _masked(manager.get_config())


@router.post("/config", response_model=MessageResponse)
async def update_database_config(
    update: DatabaseConfigUpdate,
    manager: SyncManager = Depends(get_sync_manager)
):
    """Update the sync configuration and reschedule auto-sync"""
    manager.update_config(update)
    return MessageResponse(message="Database configuration updated successfully")


@router.post("/test-connection", response_model=SyncStatus)
async def test_database_connection(manager: SyncManager = Depends(get_sync_manager)):
    """Test the external database connection"""
    return await manager.test_connection()


@router.post("/sync", response_model=SyncStatus)
async def trigger_sync_now(manager: SyncManager = Depends(get_sync_manager)):
    """Manually trigger a sync immediately"""
    return await manager.perform_sync()
