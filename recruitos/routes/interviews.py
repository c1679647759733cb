"""
Interview Management API endpoints
Schedule interviews and record their outcome
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from recruitos.core.utils import to_naive_utc, utcnow
from recruitos.models.schemas import (
    InterviewResponse,
    InterviewCreate,
    InterviewUpdate
)
from recruitos.services.storage import BaseStorage, StorageError, get_storage

router = APIRouter()


# ============================================
# Interview Listing
# ============================================

@router.get("", response_model=List[InterviewResponse])
async def list_interviews(
    candidate_id: Optional[int] = Query(None, description="Filter by candidate"),
    on_date: Optional[datetime] = Query(None, alias="date", description="Interviews on this day"),
    storage: BaseStorage = Depends(get_storage)
):
    """List interviews for a candidate, for a day, or all of them"""
    if candidate_id is not None:
        return await storage.get_interviews_by_candidate(candidate_id)
    if on_date is not None:
        return await storage.get_interviews_for_date(to_naive_utc(on_date).date())
    return await storage.get_all_interviews()


@router.get("/today", response_model=List[InterviewResponse])
async def get_today_interviews(storage: BaseStorage = Depends(get_storage)):
    """Get all interviews scheduled for today"""
    return await storage.get_interviews_for_date(utcnow().date())


@router.get("/upcoming", response_model=List[InterviewResponse])
async def get_upcoming_interviews(
    days: int = Query(7, ge=1, le=90, description="Number of days ahead"),
    storage: BaseStorage = Depends(get_storage)
):
    """Get upcoming interviews for the next X days"""
    return await storage.get_upcoming_interviews(days)


# ============================================
# Interview CRUD
# ============================================

@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(interview_id: int, storage: BaseStorage = Depends(get_storage)):
    """Get a single interview by ID"""
    interview = await storage.get_interview(interview_id)
    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.post("", response_model=InterviewResponse, status_code=201)
async def create_interview(interview: InterviewCreate, storage: BaseStorage = Depends(get_storage)):
    """Schedule a new interview"""
    try:
        return await storage.create_interview(interview)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{interview_id}", response_model=InterviewResponse)
async def update_interview(
    interview_id: int,
    update: InterviewUpdate,
    storage: BaseStorage = Depends(get_storage)
):
    """Update an interview (reschedule, complete, rate...)"""
    try:
        interview = await storage.update_interview(interview_id, update)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.delete("/{interview_id}", status_code=204)
async def delete_interview(interview_id: int, storage: BaseStorage = Depends(get_storage)):
    """Delete an interview"""
    if not await storage.delete_interview(interview_id):
        raise HTTPException(status_code=404, detail="Interview not found")
    return Response(status_code=204)
