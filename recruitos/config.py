"""
RecruitOS - Configuration
All settings loaded from environment variables
"""
from pathlib import Path
from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # Use absolute path for .env file (works regardless of working directory)
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Base directory
    base_dir: Path = BASE_DIR

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # Local record store
    storage_backend: Literal["memory", "database"] = "memory"
    storage_database_url: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'recruitos.db'}"
    seed_demo_data: bool = True

    # External database the sync job pushes to (DATABASE_URL)
    database_url: str = ""
    auto_sync: bool = True
    sync_frequency: Literal["manual", "15min", "1hour", "daily"] = "1hour"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Module-level shortcuts used by main.py
settings = get_settings()
HOST = settings.host
PORT = settings.port
DEBUG = settings.debug
