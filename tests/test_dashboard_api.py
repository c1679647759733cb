"""
Tests for the dashboard, activity and health endpoints
"""
from fastapi.testclient import TestClient

from recruitos.core.utils import utcnow
from recruitos.main import app
from recruitos.services.storage import MemStorage, get_storage


class BrokenStorage(MemStorage):
    async def get_dashboard_stats(self):
        raise RuntimeError("stats table is gone")


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "recruitos"}


def test_unexpected_error_returns_500(client):
    app.dependency_overrides[get_storage] = lambda: BrokenStorage()
    failing_client = TestClient(app, raise_server_exceptions=False)

    response = failing_client.get("/api/dashboard/stats")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


class TestDashboardStats:

    def test_empty_stats(self, client):
        response = client.get("/api/dashboard/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["total_candidates"] == 0
        assert body["phase1_count"] == 0
        assert body["phase2_count"] == 0
        assert body["hired_count"] == 0
        assert body["interviews_today"] == 0
        assert body["sync_status"] == "synced"
        assert body["last_sync"]

    def test_stats_follow_pipeline(self, client, candidate_data):
        first = client.post("/api/candidates", json=candidate_data()).json()
        client.post("/api/candidates", json=candidate_data(phase=2, status="Technical Interview"))
        client.post("/api/candidates", json=candidate_data(phase=2, status="Hired"))
        client.post("/api/interviews", json={
            "candidate_id": first["id"],
            "scheduled_date": utcnow().isoformat(),
            "interviewer": "Jane Doe",
        })

        body = client.get("/api/dashboard/stats").json()

        assert body["total_candidates"] == 3
        assert body["phase1_count"] == 1
        assert body["phase2_count"] == 2
        assert body["hired_count"] == 1
        assert body["interviews_today"] == 1


class TestRecentActivity:

    def test_empty_feed(self, client):
        assert client.get("/api/activity").json() == []

    def test_feed_entries(self, client, candidate_data):
        candidate = client.post(
            "/api/candidates", json=candidate_data(first_name="Emma", last_name="Wilson")
        ).json()
        client.post("/api/interviews", json={
            "candidate_id": candidate["id"],
            "scheduled_date": "2099-01-01T10:00:00",
            "interviewer": "Bob Wilson",
        })

        feed = client.get("/api/activity").json()

        assert [item["type"] for item in feed] == ["interview", "candidate"]
        assert feed[0]["action"] == "Interview scheduled"
        assert feed[0]["candidate_name"] == "Emma Wilson"
        assert feed[0]["interviewer"] == "Bob Wilson"
        assert feed[1]["id"] == f"candidate-{candidate['id']}"
        assert feed[1]["action"] == "moved to New"

    def test_feed_limit(self, client, candidate_data):
        for _ in range(6):
            client.post("/api/candidates", json=candidate_data())

        assert len(client.get("/api/activity").json()) == 6
        assert len(client.get("/api/activity", params={"limit": 3}).json()) == 3
        assert client.get("/api/activity", params={"limit": 0}).status_code == 400
