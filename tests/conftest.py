"""
Shared fixtures: isolated stores wired into the app
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recruitos.core.database import build_engine, init_db
from recruitos.main import app
from recruitos.models.schemas import DatabaseConfig
from recruitos.services.database_storage import DatabaseStorage
from recruitos.services.storage import MemStorage, get_storage
from recruitos.services.sync import SyncManager, get_sync_manager


@pytest.fixture
def candidate_data():
    """Factory for valid candidate payloads"""
    counter = {"n": 0}

    def make(**overrides):
        counter["n"] += 1
        data = {
            "first_name": "Test",
            "last_name": f"Person{counter['n']}",
            "email": f"test.person{counter['n']}@example.com",
            "position": "Software Engineer",
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def mem_storage():
    return MemStorage()


@pytest.fixture(params=["memory", "database"])
async def storage(request, tmp_path):
    """Each storage backend in turn, starting empty"""
    if request.param == "memory":
        yield MemStorage()
        return

    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'recruitos_test.db'}")
    await init_db(engine)
    yield DatabaseStorage(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
    await engine.dispose()


@pytest.fixture
def sync_manager(mem_storage):
    manager = SyncManager(
        mem_storage,
        DatabaseConfig(database_url="", auto_sync=False, sync_frequency="manual")
    )
    yield manager
    manager.shutdown()


@pytest.fixture
def client(mem_storage, sync_manager):
    app.dependency_overrides[get_storage] = lambda: mem_storage
    app.dependency_overrides[get_sync_manager] = lambda: sync_manager
    yield TestClient(app)
    app.dependency_overrides.clear()
