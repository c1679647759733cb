"""
Tests for the demo data seeder
"""
from recruitos.models.database_models import PHASE_STATUSES
from recruitos.models.schemas import CandidateCreate
from recruitos.services.demo_data import FEATURED_CANDIDATES, build_candidates, seed_demo_data


def test_generated_statuses_match_phase():
    for candidate in build_candidates():
        assert candidate.status in PHASE_STATUSES[candidate.phase]


def test_generated_emails_are_unique():
    emails = [c.email for c in build_candidates()]
    assert len(emails) == len(set(emails))


async def test_seed_empty_store(storage):
    assert await seed_demo_data(storage) is True

    candidates = await storage.get_all_candidates()
    assert len(candidates) == len(FEATURED_CANDIDATES) + 50
    assert candidates[0].full_name == "Sarah Johnson"
    assert len(await storage.get_all_interviews()) == 23

    stats = await storage.get_dashboard_stats()
    assert stats.total_candidates == 55
    assert stats.phase1_count + stats.phase2_count == 55


async def test_seed_skips_populated_store(storage, candidate_data):
    await storage.create_candidate(CandidateCreate(**candidate_data()))

    assert await seed_demo_data(storage) is False
    assert len(await storage.get_all_candidates()) == 1
