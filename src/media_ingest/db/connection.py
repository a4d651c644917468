"""
Database Connection Helpers

Supports both:
- PostgreSQL (production): Set DATABASE_URL environment variable
- Local SQLite (development/test): Uses MEDIA_DB_PATH or an explicit path
"""

import os
from pathlib import Path
from typing import Any

from media_ingest.core.config import settings, Environment


def is_postgres_mode() -> bool:
    """Check if we're using PostgreSQL."""
    return os.getenv("DATABASE_URL") is not None


def sql_placeholder() -> str:
    """Return parameter placeholder for current database driver."""
    return "%s" if is_postgres_mode() else "?"


def get_connection(db_path: str | None = None) -> Any:
    """Get database connection (PostgreSQL or local SQLite).

    Args:
        db_path: Optional path to SQLite database. Ignored if DATABASE_URL is set.

    Raises:
        RuntimeError: If ENVIRONMENT is 'production' but DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")

    if settings.ENVIRONMENT == Environment.PRODUCTION and not database_url:
        raise RuntimeError(
            "DATABASE_URL is required in production environment. "
            "Set DATABASE_URL environment variable."
        )

    if database_url:
        # PostgreSQL (production)
        import psycopg2

        return psycopg2.connect(database_url)
    else:
        # Local SQLite (development)
        import sqlite3

        path = db_path or settings.MEDIA_DB_PATH
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(path)
