"""
Candidate API endpoints
Pipeline listing, search, CRUD and CSV export
"""
import csv
import io
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import StreamingResponse

from recruitos.core.utils import utcnow
from recruitos.models.database_models import CandidateStatus, CandidateSource, PHASE_STATUSES
from recruitos.models.schemas import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    InterviewResponse
)
from recruitos.services.storage import BaseStorage, StorageError, get_storage

router = APIRouter()


# ============================================
# Candidate Listing
# ============================================

@router.get("", response_model=List[CandidateResponse])
async def list_candidates(
    phase: Optional[int] = Query(None, ge=1, le=2, description="Filter by pipeline phase"),
    status: Optional[CandidateStatus] = Query(None, description="Filter by status"),
    source: Optional[CandidateSource] = Query(None, description="Filter by source"),
    search: Optional[str] = Query(None, description="Search name, email or position"),
    storage: BaseStorage = Depends(get_storage)
):
    """List candidates, optionally filtered. All filters combine."""
    if status is None and source is None:
        if search and phase is None:
            return await storage.search_candidates(search)
        if not search:
            if phase is None:
                return await storage.get_all_candidates()
            return await storage.get_candidates_by_phase(phase)

    return await storage.filter_candidates(
        phase=phase,
        status=status.value if status else None,
        source=source.value if source else None,
        search=search
    )


@router.get("/statuses", response_model=Dict[int, List[CandidateStatus]])
async def get_phase_statuses():
    """Statuses valid in each pipeline phase"""
    return PHASE_STATUSES


@router.get("/export")
async def export_candidates_csv(
    phase: Optional[int] = Query(None, ge=1, le=2),
    storage: BaseStorage = Depends(get_storage)
):
    """Export candidates to CSV"""
    if phase is not None:
        candidates = await storage.get_candidates_by_phase(phase)
    else:
        candidates = await storage.get_all_candidates()

    # Create CSV in memory
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow([
        "Name", "Email", "Phone", "Position", "Phase", "Status",
        "Source", "Experience", "Applied Date"
    ])

    for c in candidates:
        writer.writerow([
            c.full_name,
            c.email,
            c.phone or "",
            c.position,
            c.phase,
            c.status,
            c.source,
            c.experience if c.experience is not None else "",
            c.applied_date.strftime("%Y-%m-%d")
        ])

    output.seek(0)

    scope = f"phase{phase}" if phase else "all"
    filename = f"candidates_{scope}_{utcnow().strftime('%Y%m%d')}.csv"

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# ============================================
# Candidate CRUD
# ============================================

@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(candidate_id: int, storage: BaseStorage = Depends(get_storage)):
    """Get a single candidate by ID"""
    candidate = await storage.get_candidate(candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


@router.get("/{candidate_id}/interviews", response_model=List[InterviewResponse])
async def get_candidate_interviews(candidate_id: int, storage: BaseStorage = Depends(get_storage)):
    """All interviews for a candidate"""
    if not await storage.get_candidate(candidate_id):
        raise HTTPException(status_code=404, detail="Candidate not found")
    return await storage.get_interviews_by_candidate(candidate_id)


@router.post("", response_model=CandidateResponse, status_code=201)
async def create_candidate(candidate: CandidateCreate, storage: BaseStorage = Depends(get_storage)):
    """Add a candidate to the pipeline"""
    try:
        return await storage.create_candidate(candidate)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    candidate_id: int,
    update: CandidateUpdate,
    storage: BaseStorage = Depends(get_storage)
):
    """Update a candidate; only the fields sent are changed"""
    try:
        candidate = await storage.update_candidate(candidate_id, update)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


@router.delete("/{candidate_id}", status_code=204)
async def delete_candidate(candidate_id: int, storage: BaseStorage = Depends(get_storage)):
    """Delete a candidate and their interviews"""
    if not await storage.delete_candidate(candidate_id):
        raise HTTPException(status_code=404, detail="Candidate not found")
    return Response(status_code=204)
