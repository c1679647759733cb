"""
RecruitOS - Pydantic Schemas
Request/Response models for API endpoints
"""
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from recruitos.core.utils import to_naive_utc
from recruitos.models.database_models import (
    CandidateStatus,
    CandidateSource,
    InterviewType,
    InterviewStatus,
    SyncState
)

SyncFrequency = Literal["manual", "15min", "1hour", "daily"]


def _reject_null(value, info):
    if value is None:
        raise ValueError(f"{info.field_name} may not be null")
    return value


# ============================================
# Candidate Schemas
# ============================================

class CandidateBase(BaseModel):
    """Base candidate fields"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    position: str = Field(..., min_length=1, max_length=200)
    phase: int = Field(1, ge=1, le=2)
    status: CandidateStatus = CandidateStatus.NEW
    source: CandidateSource = CandidateSource.LINKEDIN
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class CandidateCreate(CandidateBase):
    """Create a new candidate"""
    pass


class CandidateUpdate(BaseModel):
    """Partial candidate update; only the fields sent are applied"""
    model_config = ConfigDict(use_enum_values=True)

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    position: Optional[str] = Field(None, min_length=1, max_length=200)
    phase: Optional[int] = Field(None, ge=1, le=2)
    status: Optional[CandidateStatus] = None
    source: Optional[CandidateSource] = None
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    reject_null_required = field_validator(
        "first_name", "last_name", "email", "position", "phase", "status", "source"
    )(_reject_null)


class CandidateResponse(CandidateBase):
    """Stored candidate"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    applied_date: datetime
    last_updated: datetime

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


# ============================================
# Interview Schemas
# ============================================

class InterviewBase(BaseModel):
    """Base interview fields"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    candidate_id: int = Field(..., gt=0)
    type: InterviewType = InterviewType.PHONE
    scheduled_date: datetime
    duration: int = Field(60, gt=0, le=1440)  # minutes
    interviewer: str = Field(..., min_length=1, max_length=100)
    status: InterviewStatus = InterviewStatus.SCHEDULED
    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None

    @field_validator("scheduled_date")
    @classmethod
    def normalize_scheduled_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class InterviewCreate(InterviewBase):
    """Schedule a new interview"""
    pass


class InterviewUpdate(BaseModel):
    """Partial interview update; only the fields sent are applied"""
    model_config = ConfigDict(use_enum_values=True)

    candidate_id: Optional[int] = Field(None, gt=0)
    type: Optional[InterviewType] = None
    scheduled_date: Optional[datetime] = None
    duration: Optional[int] = Field(None, gt=0, le=1440)
    interviewer: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[InterviewStatus] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None

    reject_null_required = field_validator(
        "candidate_id", "type", "scheduled_date", "duration", "interviewer", "status"
    )(_reject_null)

    @field_validator("scheduled_date")
    @classmethod
    def normalize_scheduled_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else value


class InterviewResponse(InterviewBase):
    """Stored interview"""
    model_config = ConfigDict(from_attributes=True)

    id: int


# ============================================
# Dashboard Schemas
# ============================================

class DashboardStats(BaseModel):
    """Pipeline counts plus sync state"""
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int = 1
    total_candidates: int = 0
    phase1_count: int = 0
    phase2_count: int = 0
    hired_count: int = 0
    interviews_today: int = 0
    sync_status: SyncState = SyncState.SYNCED
    last_sync: datetime


class DashboardStatsUpdate(BaseModel):
    """Fields of the stats snapshot that are set rather than counted"""
    model_config = ConfigDict(use_enum_values=True)

    sync_status: Optional[SyncState] = None
    last_sync: Optional[datetime] = None


class ActivityItem(BaseModel):
    """Entry in the recent activity feed"""
    id: str
    type: Literal["candidate", "interview"]
    action: str
    timestamp: datetime
    candidate_name: Optional[str] = None
    interviewer: Optional[str] = None


# ============================================
# Database / Sync Schemas
# ============================================

class DatabaseConfig(BaseModel):
    """External database connection and auto-sync settings"""
    database_url: str = ""
    auto_sync: bool = True
    sync_frequency: SyncFrequency = "1hour"


class DatabaseConfigUpdate(BaseModel):
    database_url: Optional[str] = None
    auto_sync: Optional[bool] = None
    sync_frequency: Optional[SyncFrequency] = None


class SyncStatus(BaseModel):
    """Connection test / sync outcome"""
    is_connected: bool
    last_sync: Optional[datetime] = None
    next_sync: Optional[datetime] = None
    error: Optional[str] = None


class MessageResponse(BaseModel):
    """Generic success response"""
    success: bool = True
    message: str = "Operation completed successfully"
