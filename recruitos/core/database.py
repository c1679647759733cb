"""
RecruitOS - Database Configuration
SQLite with SQLAlchemy async support
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.engine import make_url
from sqlalchemy import event
from pathlib import Path

from recruitos.config import get_settings

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().storage_database_url


class Base(DeclarativeBase):
    """Base class for all models"""
    pass


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite for better concurrency"""
    cursor = dbapi_connection.cursor()
    # WAL mode allows concurrent reads while writing
    cursor.execute("PRAGMA journal_mode=WAL")
    # Wait up to 30 seconds for locks to clear
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, applying SQLite pragmas when the URL is SQLite"""
    is_sqlite = make_url(url).get_backend_name() == "sqlite"
    engine = create_async_engine(
        url,
        echo=echo,
        connect_args={"timeout": 30} if is_sqlite else {},
        pool_pre_ping=True,
    )
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", set_sqlite_pragma)
    return engine


def sqlite_path(url: str) -> Optional[Path]:
    """File path of a SQLite URL, or None for other backends and in-memory databases"""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite" or not parsed.database or parsed.database == ":memory:":
        return None
    return Path(parsed.database)


engine = build_engine(DATABASE_URL)

# Session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def init_db(target: AsyncEngine = engine):
    """Initialize database and create all tables"""
    # Import models to register them with Base.metadata
    from recruitos.models import database_models  # noqa: F401

    # Ensure data directory exists
    path = sqlite_path(target.url.render_as_string(hide_password=False))
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized at %s", target.url.render_as_string(hide_password=True))
