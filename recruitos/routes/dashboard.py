"""
Dashboard API endpoints
Pipeline counts and the recent activity feed
"""
from typing import List
from fastapi import APIRouter, Depends, Query

from recruitos.models.schemas import ActivityItem, DashboardStats
from recruitos.services.storage import BaseStorage, get_storage

router = APIRouter()
activity_router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(storage: BaseStorage = Depends(get_storage)):
    """Get dashboard statistics"""
    return await storage.get_dashboard_stats()


@activity_router.get("", response_model=List[ActivityItem])
async def get_activity(
    limit: int = Query(10, ge=1, le=50),
    storage: BaseStorage = Depends(get_storage)
):
    """Most recent candidate and interview events, newest first"""
    return await storage.get_recent_activity(limit)
