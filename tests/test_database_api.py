"""
Tests for the /api/database endpoints
"""
import pytest


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'external.db'}"


class TestDatabaseConfig:

    def test_default_config(self, client):
        response = client.get("/api/database/config")

        assert response.status_code == 200
        assert response.json() == {
            "database_url": "",
            "auto_sync": False,
            "sync_frequency": "manual",
        }

    def test_update_masks_url(self, client, sqlite_url, sync_manager):
        response = client.post("/api/database/config", json={"database_url": sqlite_url})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Database configuration updated successfully",
        }
        assert client.get("/api/database/config").json()["database_url"] == "***configured***"
        assert sync_manager.get_config().database_url == sqlite_url

    def test_partial_update_keeps_other_fields(self, client):
        client.post("/api/database/config", json={"sync_frequency": "daily"})

        config = client.get("/api/database/config").json()
        assert config["sync_frequency"] == "daily"
        assert config["auto_sync"] is False

    def test_rejects_unknown_frequency(self, client):
        response = client.post("/api/database/config", json={"sync_frequency": "hourly"})
        assert response.status_code == 400


class TestConnection:

    def test_status_without_url(self, client):
        response = client.get("/api/database/status")

        assert response.status_code == 200
        body = response.json()
        assert body["is_connected"] is False
        assert body["error"] == "No database URL configured"

    def test_connection_to_sqlite(self, client, sqlite_url):
        client.post("/api/database/config", json={"database_url": sqlite_url})

        response = client.post("/api/database/test-connection")

        assert response.status_code == 200
        body = response.json()
        assert body["is_connected"] is True
        assert body["error"] is None
        assert body["next_sync"] is None

    def test_connection_failure_reports_error(self, client, tmp_path):
        bad_url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}"
        client.post("/api/database/config", json={"database_url": bad_url})

        body = client.get("/api/database/status").json()
        assert body["is_connected"] is False
        assert body["error"]


class TestManualSync:

    def test_sync_success_updates_dashboard(self, client, sqlite_url):
        client.post("/api/database/config", json={"database_url": sqlite_url})

        response = client.post("/api/database/sync")

        assert response.status_code == 200
        body = response.json()
        assert body["is_connected"] is True
        assert body["last_sync"] is not None

        stats = client.get("/api/dashboard/stats").json()
        assert stats["sync_status"] == "synced"
        assert stats["last_sync"] == body["last_sync"]

        status = client.get("/api/database/sync-status").json()
        assert status["is_connected"] is True
        assert status["last_sync"] == body["last_sync"]

    def test_sync_without_url_marks_error(self, client):
        response = client.post("/api/database/sync")

        body = response.json()
        assert body["is_connected"] is False
        assert body["error"] == "No database URL configured"
        assert client.get("/api/dashboard/stats").json()["sync_status"] == "error"

        status = client.get("/api/database/sync-status").json()
        assert status["is_connected"] is False
        assert status["error"] == "No database URL configured"
