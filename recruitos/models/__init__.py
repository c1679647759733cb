"""
RecruitOS - Database Models and Schemas
"""
from .database_models import (
    Candidate,
    Interview,
    DashboardSnapshot,
    CandidateStatus,
    CandidateSource,
    InterviewType,
    InterviewStatus,
    SyncState,
    PHASE_STATUSES
)
from .schemas import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    InterviewCreate,
    InterviewUpdate,
    InterviewResponse,
    DashboardStats,
    DashboardStatsUpdate,
    ActivityItem,
    DatabaseConfig,
    DatabaseConfigUpdate,
    SyncStatus,
    MessageResponse
)

__all__ = [
    # Database models
    "Candidate",
    "Interview",
    "DashboardSnapshot",
    # Enums
    "CandidateStatus",
    "CandidateSource",
    "InterviewType",
    "InterviewStatus",
    "SyncState",
    "PHASE_STATUSES",
    # Pydantic schemas
    "CandidateCreate",
    "CandidateUpdate",
    "CandidateResponse",
    "InterviewCreate",
    "InterviewUpdate",
    "InterviewResponse",
    "DashboardStats",
    "DashboardStatsUpdate",
    "ActivityItem",
    "DatabaseConfig",
    "DatabaseConfigUpdate",
    "SyncStatus",
    "MessageResponse",
]
