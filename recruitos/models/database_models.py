"""
RecruitOS - SQLAlchemy Database Models
Relational schema for the database storage backend
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, Text, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from recruitos.core.database import Base
from recruitos.core.utils import utcnow
import enum


class CandidateStatus(str, enum.Enum):
    """Position within a pipeline phase"""
    # Phase 1
    NEW = "New"
    SCREENED = "Screened"
    PHONE_INTERVIEW = "Phone Interview"
    REJECTED = "Rejected"
    # Phase 2
    TECHNICAL_INTERVIEW = "Technical Interview"
    FINAL_INTERVIEW = "Final Interview"
    OFFER_EXTENDED = "Offer Extended"
    HIRED = "Hired"


class CandidateSource(str, enum.Enum):
    """Where the application came from"""
    LINKEDIN = "LinkedIn"
    INDEED = "Indeed"
    REFERRAL = "Referral"
    WEBSITE = "Website"


class InterviewType(str, enum.Enum):
    PHONE = "Phone"
    VIDEO = "Video"
    IN_PERSON = "In-Person"
    TECHNICAL = "Technical"


class InterviewStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class SyncState(str, enum.Enum):
    SYNCED = "synced"
    SYNCING = "syncing"
    ERROR = "error"


# Statuses a candidate may hold in each phase
PHASE_STATUSES = {
    1: [
        CandidateStatus.NEW,
        CandidateStatus.SCREENED,
        CandidateStatus.PHONE_INTERVIEW,
        CandidateStatus.REJECTED,
    ],
    2: [
        CandidateStatus.TECHNICAL_INTERVIEW,
        CandidateStatus.FINAL_INTERVIEW,
        CandidateStatus.OFFER_EXTENDED,
        CandidateStatus.HIRED,
    ],
}


class Candidate(Base):
    """
    A person moving through the hiring pipeline.
    Phase 1 covers sourcing and screening, phase 2 interviewing and closing.
    """
    __tablename__ = "candidates"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Basic info
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    position: Mapped[str] = mapped_column(String(200))

    # Pipeline
    phase: Mapped[int] = mapped_column(Integer, default=1, index=True)
    status: Mapped[str] = mapped_column(String(50), default=CandidateStatus.NEW.value, index=True)
    source: Mapped[str] = mapped_column(String(50), default=CandidateSource.LINKEDIN.value)

    # Profile
    resume_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    skills: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    experience: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # years
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    applied_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<Candidate {self.first_name} {self.last_name} ({self.status})>"


# Emails are unique regardless of case
Index("ix_candidates_email_lower", func.lower(Candidate.email), unique=True)


class Interview(Base):
    """
    Interview scheduling and tracking.
    """
    __tablename__ = "interviews"

    id: Mapped[int] = mapped_column(primary_key=True)
    candidate_id: Mapped[int] = mapped_column(
        ForeignKey("candidates.id", ondelete="CASCADE"), index=True
    )

    # Schedule
    type: Mapped[str] = mapped_column(String(30), default=InterviewType.PHONE.value)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime, index=True)
    duration: Mapped[int] = mapped_column(Integer, default=60)  # minutes
    interviewer: Mapped[str] = mapped_column(String(100))

    # Outcome
    status: Mapped[str] = mapped_column(String(30), default=InterviewStatus.SCHEDULED.value, index=True)
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # 1-5
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<Interview {self.candidate_id} @ {self.scheduled_date}>"


class DashboardSnapshot(Base):
    """
    Single-row snapshot of pipeline counts and sync state.
    Counts are rewritten after every candidate or interview change.
    """
    __tablename__ = "dashboard_stats"

    id: Mapped[int] = mapped_column(primary_key=True)
    total_candidates: Mapped[int] = mapped_column(Integer, default=0)
    phase1_count: Mapped[int] = mapped_column(Integer, default=0)
    phase2_count: Mapped[int] = mapped_column(Integer, default=0)
    hired_count: Mapped[int] = mapped_column(Integer, default=0)
    interviews_today: Mapped[int] = mapped_column(Integer, default=0)
    sync_status: Mapped[str] = mapped_column(String(20), default=SyncState.SYNCED.value)
    last_sync: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<DashboardSnapshot {self.total_candidates} candidates ({self.sync_status})>"
