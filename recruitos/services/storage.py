"""
RecruitOS - Record Storage
==========================
Repository for candidates, interviews and the dashboard stats snapshot.

Two interchangeable backends implement ``BaseStorage``:

``MemStorage``
    Dict-backed store keyed by auto-incrementing ids. Nothing survives a
    restart; used for demos and tests.

``DatabaseStorage`` (``recruitos.services.database_storage``)
    Same contract on top of async SQLAlchemy.

Every mutating call recomputes the dashboard counts before returning, and
``get_dashboard_stats`` recomputes them again so "interviews today" follows
the clock.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from functools import lru_cache
from typing import Dict, List, Optional

from recruitos.config import get_settings
from recruitos.core.utils import day_window, utcnow
from recruitos.models.database_models import CandidateStatus, InterviewStatus
from recruitos.models.schemas import (
    ActivityItem,
    CandidateCreate,
    CandidateResponse,
    CandidateUpdate,
    DashboardStats,
    DashboardStatsUpdate,
    InterviewCreate,
    InterviewResponse,
    InterviewUpdate,
)

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for rejected storage operations"""


class DuplicateEmailError(StorageError):
    def __init__(self, email: str):
        super().__init__(f"A candidate with email {email} already exists")
        self.email = email


class CandidateNotFoundError(StorageError):
    """An interview referenced a candidate id that does not exist"""

    def __init__(self, candidate_id: int):
        super().__init__(f"Candidate {candidate_id} does not exist")
        self.candidate_id = candidate_id


def matches_search(candidate: CandidateResponse, query: str) -> bool:
    """Case-insensitive substring match over name, email and position"""
    needle = query.lower()
    return any(
        needle in value.lower()
        for value in (candidate.first_name, candidate.last_name, candidate.email, candidate.position)
    )


# ---------------------------------------------------------------------------
# Abstract Base
# ---------------------------------------------------------------------------

class BaseStorage(ABC):
    """Interface that all storage backends must implement."""

    # Candidates

    @abstractmethod
    async def get_all_candidates(self) -> List[CandidateResponse]:
        """All candidates in id order."""

    @abstractmethod
    async def get_candidates_by_phase(self, phase: int) -> List[CandidateResponse]:
        ...

    @abstractmethod
    async def get_candidate(self, candidate_id: int) -> Optional[CandidateResponse]:
        ...

    @abstractmethod
    async def create_candidate(self, data: CandidateCreate) -> CandidateResponse:
        """
        Store a new candidate under the next id.

        Raises:
            DuplicateEmailError: the email is already used by another candidate.
        """

    @abstractmethod
    async def update_candidate(
        self, candidate_id: int, updates: CandidateUpdate
    ) -> Optional[CandidateResponse]:
        """
        Merge the fields set on ``updates`` and refresh ``last_updated``.

        Returns:
            The updated candidate, or ``None`` if the id is unknown.
        """

    @abstractmethod
    async def delete_candidate(self, candidate_id: int) -> bool:
        """Delete a candidate and their interviews. Returns whether it existed."""

    @abstractmethod
    async def search_candidates(self, query: str) -> List[CandidateResponse]:
        ...

    @abstractmethod
    async def filter_candidates(
        self,
        phase: Optional[int] = None,
        status: Optional[str] = None,
        source: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CandidateResponse]:
        """Candidates matching every filter given."""

    # Interviews

    @abstractmethod
    async def get_all_interviews(self) -> List[InterviewResponse]:
        """All interviews in id order."""

    @abstractmethod
    async def get_interviews_by_candidate(self, candidate_id: int) -> List[InterviewResponse]:
        ...

    @abstractmethod
    async def get_interview(self, interview_id: int) -> Optional[InterviewResponse]:
        ...

    @abstractmethod
    async def create_interview(self, data: InterviewCreate) -> InterviewResponse:
        """
        Raises:
            CandidateNotFoundError: ``candidate_id`` does not reference a candidate.
        """

    @abstractmethod
    async def update_interview(
        self, interview_id: int, updates: InterviewUpdate
    ) -> Optional[InterviewResponse]:
        ...

    @abstractmethod
    async def delete_interview(self, interview_id: int) -> bool:
        ...

    @abstractmethod
    async def get_interviews_for_date(self, day: date) -> List[InterviewResponse]:
        """Interviews scheduled within ``day``, earliest first."""

    @abstractmethod
    async def get_upcoming_interviews(self, days: int = 7) -> List[InterviewResponse]:
        """Scheduled interviews between now and ``days`` from now, earliest first."""

    # Dashboard

    @abstractmethod
    async def get_dashboard_stats(self) -> DashboardStats:
        ...

    @abstractmethod
    async def update_dashboard_stats(self, updates: DashboardStatsUpdate) -> DashboardStats:
        ...

    async def get_recent_activity(self, limit: int = 10) -> List[ActivityItem]:
        """
        Merge the most recent candidates and interviews into one feed,
        newest first.
        """
        candidates = await self.get_all_candidates()
        interviews = await self.get_all_interviews()
        names = {c.id: c.full_name for c in candidates}

        items = [
            ActivityItem(
                id=f"candidate-{c.id}",
                type="candidate",
                candidate_name=c.full_name,
                action=f"moved to {c.status}",
                timestamp=c.last_updated,
            )
            for c in candidates[-limit:]
        ]
        items.extend(
            ActivityItem(
                id=f"interview-{i.id}",
                type="interview",
                candidate_name=names.get(i.candidate_id),
                action=f"Interview {i.status.lower()}",
                timestamp=i.scheduled_date,
                interviewer=i.interviewer,
            )
            for i in interviews[-limit:]
        )
        items.sort(key=lambda item: item.timestamp, reverse=True)
        return items[:limit]


# ---------------------------------------------------------------------------
# In-Memory Implementation
# ---------------------------------------------------------------------------

class MemStorage(BaseStorage):
    """
    Dict-backed storage. Records are kept as validated response models, so
    what the routes return is exactly what was stored.
    """

    def __init__(self) -> None:
        self._candidates: Dict[int, CandidateResponse] = {}
        self._interviews: Dict[int, InterviewResponse] = {}
        self._next_candidate_id = 1
        self._next_interview_id = 1
        self._stats = DashboardStats(last_sync=utcnow())

    # Candidates

    async def get_all_candidates(self) -> List[CandidateResponse]:
        return list(self._candidates.values())

    async def get_candidates_by_phase(self, phase: int) -> List[CandidateResponse]:
        return [c for c in self._candidates.values() if c.phase == phase]

    async def get_candidate(self, candidate_id: int) -> Optional[CandidateResponse]:
        return self._candidates.get(candidate_id)

    async def create_candidate(self, data: CandidateCreate) -> CandidateResponse:
        self._check_email_free(data.email)

        now = utcnow()
        candidate = CandidateResponse.model_validate({
            **data.model_dump(),
            "id": self._next_candidate_id,
            "applied_date": now,
            "last_updated": now,
        })
        self._next_candidate_id += 1
        self._candidates[candidate.id] = candidate
        self._refresh_stats()
        return candidate

    async def update_candidate(
        self, candidate_id: int, updates: CandidateUpdate
    ) -> Optional[CandidateResponse]:
        candidate = self._candidates.get(candidate_id)
        if candidate is None:
            return None

        changes = updates.model_dump(exclude_unset=True)
        if "email" in changes:
            self._check_email_free(changes["email"], exclude_id=candidate_id)

        updated = CandidateResponse.model_validate({
            **candidate.model_dump(),
            **changes,
            "last_updated": utcnow(),
        })
        self._candidates[candidate_id] = updated
        self._refresh_stats()
        return updated

    async def delete_candidate(self, candidate_id: int) -> bool:
        if self._candidates.pop(candidate_id, None) is None:
            return False

        orphaned = [i.id for i in self._interviews.values() if i.candidate_id == candidate_id]
        for interview_id in orphaned:
            del self._interviews[interview_id]
        if orphaned:
            logger.info("Removed %d interviews of deleted candidate %d", len(orphaned), candidate_id)

        self._refresh_stats()
        return True

    async def search_candidates(self, query: str) -> List[CandidateResponse]:
        return [c for c in self._candidates.values() if matches_search(c, query)]

    async def filter_candidates(
        self,
        phase: Optional[int] = None,
        status: Optional[str] = None,
        source: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CandidateResponse]:
        results = []
        for candidate in self._candidates.values():
            if phase is not None and candidate.phase != phase:
                continue
            if status and candidate.status != status:
                continue
            if source and candidate.source != source:
                continue
            if search and not matches_search(candidate, search):
                continue
            results.append(candidate)
        return results

    def _check_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        wanted = email.lower()
        for candidate in self._candidates.values():
            if candidate.id != exclude_id and candidate.email.lower() == wanted:
                raise DuplicateEmailError(email)

    # Interviews

    async def get_all_interviews(self) -> List[InterviewResponse]:
        return list(self._interviews.values())

    async def get_interviews_by_candidate(self, candidate_id: int) -> List[InterviewResponse]:
        return [i for i in self._interviews.values() if i.candidate_id == candidate_id]

    async def get_interview(self, interview_id: int) -> Optional[InterviewResponse]:
        return self._interviews.get(interview_id)

    async def create_interview(self, data: InterviewCreate) -> InterviewResponse:
        if data.candidate_id not in self._candidates:
            raise CandidateNotFoundError(data.candidate_id)

        interview = InterviewResponse.model_validate({
            **data.model_dump(),
            "id": self._next_interview_id,
        })
        self._next_interview_id += 1
        self._interviews[interview.id] = interview
        self._refresh_stats()
        return interview

    async def update_interview(
        self, interview_id: int, updates: InterviewUpdate
    ) -> Optional[InterviewResponse]:
        interview = self._interviews.get(interview_id)
        if interview is None:
            return None

        changes = updates.model_dump(exclude_unset=True)
        if "candidate_id" in changes and changes["candidate_id"] not in self._candidates:
            raise CandidateNotFoundError(changes["candidate_id"])

        updated = InterviewResponse.model_validate({**interview.model_dump(), **changes})
        self._interviews[interview_id] = updated
        self._refresh_stats()
        return updated

    async def delete_interview(self, interview_id: int) -> bool:
        if self._interviews.pop(interview_id, None) is None:
            return False
        self._refresh_stats()
        return True

    async def get_interviews_for_date(self, day: date) -> List[InterviewResponse]:
        start, end = day_window(day)
        found = [i for i in self._interviews.values() if start <= i.scheduled_date < end]
        return sorted(found, key=lambda i: i.scheduled_date)

    async def get_upcoming_interviews(self, days: int = 7) -> List[InterviewResponse]:
        now = utcnow()
        end = now + timedelta(days=days)
        found = [
            i for i in self._interviews.values()
            if now <= i.scheduled_date <= end and i.status == InterviewStatus.SCHEDULED
        ]
        return sorted(found, key=lambda i: i.scheduled_date)

    # Dashboard

    def _refresh_stats(self) -> None:
        candidates = list(self._candidates.values())
        start, end = day_window(utcnow().date())

        self._stats = self._stats.model_copy(update={
            "total_candidates": len(candidates),
            "phase1_count": sum(1 for c in candidates if c.phase == 1),
            "phase2_count": sum(1 for c in candidates if c.phase == 2),
            "hired_count": sum(1 for c in candidates if c.status == CandidateStatus.HIRED),
            "interviews_today": sum(
                1 for i in self._interviews.values() if start <= i.scheduled_date < end
            ),
        })

    async def get_dashboard_stats(self) -> DashboardStats:
        self._refresh_stats()
        return self._stats

    async def update_dashboard_stats(self, updates: DashboardStatsUpdate) -> DashboardStats:
        changes = updates.model_dump(exclude_none=True)
        self._stats = self._stats.model_copy(update=changes)
        return self._stats


@lru_cache()
def get_storage() -> BaseStorage:
    """Storage backend selected by ``settings.storage_backend`` (cached)"""
    settings = get_settings()
    if settings.storage_backend == "database":
        from recruitos.core.database import async_session
        from recruitos.services.database_storage import DatabaseStorage

        logger.info("Using database storage backend")
        return DatabaseStorage(async_session)

    logger.info("Using in-memory storage backend")
    return MemStorage()
