"""
RecruitOS - Database Storage Backend
Same contract as MemStorage, persisted through async SQLAlchemy
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import select, delete, func, and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recruitos.core.utils import day_window, utcnow
from recruitos.models.database_models import (
    Candidate,
    Interview,
    DashboardSnapshot,
    CandidateStatus,
    InterviewStatus,
    SyncState
)
from recruitos.models.schemas import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    InterviewCreate,
    InterviewUpdate,
    InterviewResponse,
    DashboardStats,
    DashboardStatsUpdate
)
from recruitos.services.storage import BaseStorage, CandidateNotFoundError, DuplicateEmailError

logger = logging.getLogger(__name__)

STATS_ROW_ID = 1


def _search_condition(query: str):
    return or_(
        Candidate.first_name.icontains(query, autoescape=True),
        Candidate.last_name.icontains(query, autoescape=True),
        Candidate.email.icontains(query, autoescape=True),
        Candidate.position.icontains(query, autoescape=True)
    )


class DatabaseStorage(BaseStorage):
    """
    Storage backed by the relational schema in ``database_models``.
    Each call runs in its own session; mutations commit before returning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # ============================================
    # Candidates
    # ============================================

    async def get_all_candidates(self) -> List[CandidateResponse]:
        return await self._list_candidates()

    async def get_candidates_by_phase(self, phase: int) -> List[CandidateResponse]:
        return await self._list_candidates(Candidate.phase == phase)

    async def get_candidate(self, candidate_id: int) -> Optional[CandidateResponse]:
        async with self.session_factory() as db:
            candidate = await db.get(Candidate, candidate_id)
            return CandidateResponse.model_validate(candidate) if candidate else None

    async def create_candidate(self, data: CandidateCreate) -> CandidateResponse:
        async with self.session_factory() as db:
            await self._check_email_free(db, data.email)

            now = utcnow()
            candidate = Candidate(**data.model_dump(), applied_date=now, last_updated=now)
            db.add(candidate)
            await self._flush_candidate(db, data.email)
            await self._refresh_stats(db)
            await db.commit()
            await db.refresh(candidate)

            return CandidateResponse.model_validate(candidate)

    async def update_candidate(
        self, candidate_id: int, updates: CandidateUpdate
    ) -> Optional[CandidateResponse]:
        async with self.session_factory() as db:
            candidate = await db.get(Candidate, candidate_id)
            if not candidate:
                return None

            changes = updates.model_dump(exclude_unset=True)
            if "email" in changes:
                await self._check_email_free(db, changes["email"], exclude_id=candidate_id)

            for field, value in changes.items():
                setattr(candidate, field, value)
            candidate.last_updated = utcnow()

            await self._flush_candidate(db, candidate.email, exclude_id=candidate_id)
            await self._refresh_stats(db)
            await db.commit()
            await db.refresh(candidate)

            return CandidateResponse.model_validate(candidate)

    async def delete_candidate(self, candidate_id: int) -> bool:
        async with self.session_factory() as db:
            candidate = await db.get(Candidate, candidate_id)
            if not candidate:
                return False

            result = await db.execute(
                delete(Interview).where(Interview.candidate_id == candidate_id)
            )
            if result.rowcount:
                logger.info("Removed %d interviews of deleted candidate %d", result.rowcount, candidate_id)

            await db.delete(candidate)
            await db.flush()
            await self._refresh_stats(db)
            await db.commit()
            return True

    async def search_candidates(self, query: str) -> List[CandidateResponse]:
        return await self._list_candidates(_search_condition(query))

    async def filter_candidates(
        self,
        phase: Optional[int] = None,
        status: Optional[str] = None,
        source: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[CandidateResponse]:
        conditions = []
        if phase is not None:
            conditions.append(Candidate.phase == phase)
        if status:
            conditions.append(Candidate.status == status)
        if source:
            conditions.append(Candidate.source == source)
        if search:
            conditions.append(_search_condition(search))

        return await self._list_candidates(*conditions)

    async def _list_candidates(self, *conditions) -> List[CandidateResponse]:
        query = select(Candidate)
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(Candidate.id)

        async with self.session_factory() as db:
            result = await db.execute(query)
            return [CandidateResponse.model_validate(c) for c in result.scalars().all()]

    async def _check_email_free(
        self, db: AsyncSession, email: str, exclude_id: Optional[int] = None
    ) -> None:
        query = select(Candidate.id).where(func.lower(Candidate.email) == email.lower())
        if exclude_id is not None:
            query = query.where(Candidate.id != exclude_id)

        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise DuplicateEmailError(email)

    async def _flush_candidate(
        self, db: AsyncSession, email: str, exclude_id: Optional[int] = None
    ) -> None:
        """Flush a candidate write, reporting a lost race on the email index as a duplicate"""
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            await self._check_email_free(db, email, exclude_id=exclude_id)
            raise

    # ============================================
    # Interviews
    # ============================================

    async def get_all_interviews(self) -> List[InterviewResponse]:
        return await self._list_interviews(order_by=Interview.id)

    async def get_interviews_by_candidate(self, candidate_id: int) -> List[InterviewResponse]:
        return await self._list_interviews(Interview.candidate_id == candidate_id, order_by=Interview.id)

    async def get_interview(self, interview_id: int) -> Optional[InterviewResponse]:
        async with self.session_factory() as db:
            interview = await db.get(Interview, interview_id)
            return InterviewResponse.model_validate(interview) if interview else None

    async def create_interview(self, data: InterviewCreate) -> InterviewResponse:
        async with self.session_factory() as db:
            if not await db.get(Candidate, data.candidate_id):
                raise CandidateNotFoundError(data.candidate_id)

            interview = Interview(**data.model_dump())
            db.add(interview)
            await db.flush()
            await self._refresh_stats(db)
            await db.commit()
            await db.refresh(interview)

            return InterviewResponse.model_validate(interview)

    async def update_interview(
        self, interview_id: int, updates: InterviewUpdate
    ) -> Optional[InterviewResponse]:
        async with self.session_factory() as db:
            interview = await db.get(Interview, interview_id)
            if not interview:
                return None

            changes = updates.model_dump(exclude_unset=True)
            if "candidate_id" in changes and not await db.get(Candidate, changes["candidate_id"]):
                raise CandidateNotFoundError(changes["candidate_id"])

            for field, value in changes.items():
                setattr(interview, field, value)

            await db.flush()
            await self._refresh_stats(db)
            await db.commit()
            await db.refresh(interview)

            return InterviewResponse.model_validate(interview)

    async def delete_interview(self, interview_id: int) -> bool:
        async with self.session_factory() as db:
            interview = await db.get(Interview, interview_id)
            if not interview:
                return False

            await db.delete(interview)
            await db.flush()
            await self._refresh_stats(db)
            await db.commit()
            return True

    async def get_interviews_for_date(self, day: date) -> List[InterviewResponse]:
        start, end = day_window(day)
        return await self._list_interviews(
            Interview.scheduled_date >= start,
            Interview.scheduled_date < end,
            order_by=Interview.scheduled_date
        )

    async def get_upcoming_interviews(self, days: int = 7) -> List[InterviewResponse]:
        now = utcnow()
        return await self._list_interviews(
            Interview.scheduled_date >= now,
            Interview.scheduled_date <= now + timedelta(days=days),
            Interview.status == InterviewStatus.SCHEDULED.value,
            order_by=Interview.scheduled_date
        )

    async def _list_interviews(self, *conditions, order_by) -> List[InterviewResponse]:
        query = select(Interview)
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(order_by, Interview.id)

        async with self.session_factory() as db:
            result = await db.execute(query)
            return [InterviewResponse.model_validate(i) for i in result.scalars().all()]

    # ============================================
    # Dashboard Stats
    # ============================================

    async def _count(self, db: AsyncSession, query) -> int:
        result = await db.execute(query)
        return result.scalar() or 0

    async def _refresh_stats(self, db: AsyncSession) -> DashboardSnapshot:
        """Recount the pipeline into the snapshot row (caller commits)"""
        start, end = day_window(utcnow().date())

        snapshot = await db.get(DashboardSnapshot, STATS_ROW_ID)
        if snapshot is None:
            snapshot = DashboardSnapshot(
                id=STATS_ROW_ID,
                sync_status=SyncState.SYNCED.value,
                last_sync=utcnow()
            )
            db.add(snapshot)

        snapshot.total_candidates = await self._count(db, select(func.count(Candidate.id)))
        snapshot.phase1_count = await self._count(
            db, select(func.count(Candidate.id)).where(Candidate.phase == 1)
        )
        snapshot.phase2_count = await self._count(
            db, select(func.count(Candidate.id)).where(Candidate.phase == 2)
        )
        snapshot.hired_count = await self._count(
            db, select(func.count(Candidate.id)).where(Candidate.status == CandidateStatus.HIRED.value)
        )
        snapshot.interviews_today = await self._count(
            db,
            select(func.count(Interview.id)).where(
                and_(
                    Interview.scheduled_date >= start,
                    Interview.scheduled_date < end
                )
            )
        )
        return snapshot

    async def get_dashboard_stats(self) -> DashboardStats:
        async with self.session_factory() as db:
            snapshot = await self._refresh_stats(db)
            stats = DashboardStats.model_validate(snapshot)
            await db.commit()
            return stats

    async def update_dashboard_stats(self, updates: DashboardStatsUpdate) -> DashboardStats:
        async with self.session_factory() as db:
            snapshot = await self._refresh_stats(db)
            for field, value in updates.model_dump(exclude_none=True).items():
                setattr(snapshot, field, value)
            stats = DashboardStats.model_validate(snapshot)
            await db.commit()
            return stats
