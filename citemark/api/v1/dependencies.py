"""
FastAPI dependencies for dependency injection.
Manages the SQLite connection, source repository, metadata cache and render service.
"""
import os
from functools import lru_cache

from dotenv import load_dotenv

from citemark.application.message_rendering import MessageRenderService
from citemark.config import get_config_value
from citemark.infrastructure.cache import CachedMetadataProvider
from citemark.infrastructure.sqlite import SQLiteConnection, SQLiteSourceRepository, init_database
from citemark.utils.logger import step_logger

# Load environment variables
load_dotenv()


class AppConfig:
    """Application configuration from environment variables, falling back to config.yaml."""

    def __init__(self):
        self.db_path = os.getenv("CITEMARK_DB_PATH") or get_config_value("database.path", "data/citemark.db")
        self.metadata_ttl_seconds = float(
            os.getenv("CITEMARK_METADATA_TTL_SECONDS")
            or get_config_value("metadata.cache_ttl_seconds", 300)
        )

        if self.metadata_ttl_seconds < 0:
            raise ValueError("CITEMARK_METADATA_TTL_SECONDS must not be negative")


@lru_cache()
def get_config() -> AppConfig:
    """Get application configuration (cached singleton)."""
    return AppConfig()


@lru_cache()
def get_sqlite_connection() -> SQLiteConnection:
    """
    Get the initialized SQLite connection manager (cached singleton).

    Returns:
        SQLiteConnection with schema applied
    """
    config = get_config()
    return init_database(SQLiteConnection.get_instance(config.db_path))


@lru_cache()
def get_source_repository() -> SQLiteSourceRepository:
    """Get the source repository (cached singleton)."""
    return SQLiteSourceRepository(get_sqlite_connection())


@lru_cache()
def get_metadata_provider() -> CachedMetadataProvider:
    """Get the cached metadata provider (cached singleton)."""
    config = get_config()
    step_logger.info(f"[Dependencies] Metadata cache TTL: {config.metadata_ttl_seconds}s")
    return CachedMetadataProvider(get_source_repository(), ttl_seconds=config.metadata_ttl_seconds)


@lru_cache()
def get_render_service() -> MessageRenderService:
    """Get the message render service (cached singleton)."""
    return MessageRenderService(metadata_provider=get_metadata_provider())
