"""
RecruitOS - Demo Data
Sample candidates and interviews for an empty store
"""
import logging
import random
from typing import Iterable, List, Optional
from datetime import timedelta

from recruitos.core.utils import utcnow
from recruitos.models.database_models import PHASE_STATUSES
from recruitos.models.schemas import CandidateCreate, InterviewCreate
from recruitos.services.storage import BaseStorage

logger = logging.getLogger(__name__)

FEATURED_CANDIDATES = [
    {
        "first_name": "Sarah",
        "last_name": "Johnson",
        "email": "sarah.johnson@email.com",
        "phone": "+1 (555) 123-4567",
        "position": "Frontend Developer",
        "phase": 1,
        "status": "New",
        "source": "LinkedIn",
        "skills": "React, TypeScript, CSS",
        "experience": 3,
        "notes": "Strong React skills, excellent portfolio",
    },
    {
        "first_name": "Michael",
        "last_name": "Chen",
        "email": "michael.chen@email.com",
        "phone": "+1 (555) 234-5678",
        "position": "Backend Developer",
        "phase": 1,
        "status": "Screened",
        "source": "Indeed",
        "skills": "Node.js, Python, PostgreSQL",
        "experience": 5,
        "notes": "Solid backend experience",
    },
    {
        "first_name": "Emma",
        "last_name": "Wilson",
        "email": "emma.wilson@email.com",
        "phone": "+1 (555) 345-6789",
        "position": "Full Stack Developer",
        "phase": 2,
        "status": "Technical Interview",
        "source": "Referral",
        "skills": "React, Node.js, AWS",
        "experience": 4,
        "notes": "Referred by team member",
    },
    {
        "first_name": "David",
        "last_name": "Park",
        "email": "david.park@email.com",
        "phone": "+1 (555) 456-7890",
        "position": "DevOps Engineer",
        "phase": 2,
        "status": "Final Interview",
        "source": "Website",
        "skills": "Docker, Kubernetes, AWS",
        "experience": 6,
        "notes": "Strong DevOps background",
    },
    {
        "first_name": "Lisa",
        "last_name": "Zhang",
        "email": "lisa.zhang@email.com",
        "phone": "+1 (555) 567-8901",
        "position": "UI/UX Designer",
        "phase": 1,
        "status": "Phone Interview",
        "source": "LinkedIn",
        "skills": "Figma, Adobe Creative Suite",
        "experience": 4,
        "notes": "Excellent design portfolio",
    },
]

POSITIONS = ["Software Engineer", "Data Scientist", "Product Manager", "QA Engineer"]
SOURCES = ["LinkedIn", "Indeed", "Referral", "Website"]
INTERVIEWERS = ["John Smith", "Jane Doe", "Bob Wilson", "Alice Brown"]
INTERVIEW_TYPES = ["Phone", "Video", "Technical", "In-Person"]
INTERVIEW_STATUSES = ["Scheduled", "Completed", "Cancelled"]
DURATIONS = [30, 45, 60, 90]


def build_candidates(count: int = 50, rng: Optional[random.Random] = None) -> List[CandidateCreate]:
    """Featured candidates followed by ``count`` generated ones"""
    rng = rng or random.Random(42)
    candidates = [CandidateCreate(**data) for data in FEATURED_CANDIDATES]

    for i in range(count):
        number = i + len(FEATURED_CANDIDATES) + 1
        phase = 1 if i % 2 == 0 else 2
        candidates.append(CandidateCreate(
            first_name=f"Candidate{number}",
            last_name=f"LastName{number}",
            email=f"candidate{number}@email.com",
            phone=f"+1 (555) {600 + i:03d}-{rng.randint(1000, 9999)}",
            position=POSITIONS[i % len(POSITIONS)],
            phase=phase,
            status=rng.choice(PHASE_STATUSES[phase]),
            source=SOURCES[i % len(SOURCES)],
            skills="Various technical skills",
            experience=rng.randint(1, 10),
            notes=f"Sample candidate {number}",
        ))
    return candidates


def build_interviews(
    candidate_ids: Iterable[int], count: int = 20, rng: Optional[random.Random] = None
) -> List[InterviewCreate]:
    """A few interviews today and tomorrow, then ``count`` over the next week"""
    rng = rng or random.Random(42)
    now = utcnow()
    ids = list(candidate_ids)

    interviews = [
        InterviewCreate(candidate_id=ids[0], type="Phone", scheduled_date=now, duration=30,
                        interviewer="John Smith", status="Scheduled", notes="Initial phone screening"),
        InterviewCreate(candidate_id=ids[1], type="Technical", scheduled_date=now, duration=60,
                        interviewer="Jane Doe", status="Completed", rating=4,
                        notes="Strong technical skills"),
        InterviewCreate(candidate_id=ids[2], type="Video", scheduled_date=now + timedelta(days=1),
                        duration=45, interviewer="Bob Wilson", status="Scheduled",
                        notes="Final round interview"),
    ]

    for i in range(count):
        interviews.append(InterviewCreate(
            candidate_id=rng.choice(ids[:10]),
            type=INTERVIEW_TYPES[i % len(INTERVIEW_TYPES)],
            scheduled_date=now + timedelta(seconds=rng.uniform(0, 7 * 86400)),
            duration=DURATIONS[i % len(DURATIONS)],
            interviewer=INTERVIEWERS[i % len(INTERVIEWERS)],
            status=INTERVIEW_STATUSES[i % len(INTERVIEW_STATUSES)],
            rating=rng.randint(1, 5) if rng.random() > 0.5 else None,
            notes=f"Sample interview {i + 1}",
        ))
    return interviews


async def seed_demo_data(storage: BaseStorage, seed: int = 42) -> bool:
    """
    Fill an empty store with sample records.

    Returns:
        False if the store already held candidates and nothing was added.
    """
    if await storage.get_all_candidates():
        logger.info("Store already has candidates, skipping demo data")
        return False

    rng = random.Random(seed)
    created = [await storage.create_candidate(c) for c in build_candidates(rng=rng)]
    interviews = build_interviews([c.id for c in created], rng=rng)
    for interview in interviews:
        await storage.create_interview(interview)

    logger.info("Seeded %d demo candidates and %d interviews", len(created), len(interviews))
    return True
