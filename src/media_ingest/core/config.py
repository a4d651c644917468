"""
Ingestion Service Configuration

Infrastructure settings (environment, database) plus crawl parameters,
admin token and scheduled relay configuration.
"""

import os
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Application environment"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _get_environment() -> Environment:
    """Get and validate ENVIRONMENT variable."""
    env_value = os.getenv("ENVIRONMENT")
    if env_value is None:
        raise RuntimeError(
            "ENVIRONMENT is required. Set to 'production', 'development', or 'test'."
        )
    try:
        return Environment(env_value.lower())
    except ValueError:
        raise RuntimeError(
            f"Invalid ENVIRONMENT value: '{env_value}'. "
            "Must be 'production', 'development', or 'test'."
        )


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class InfrastructureSettings:
    """Infrastructure-level configuration (database, paths)"""

    # Project Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # Database
    # PostgreSQL (production): Set DATABASE_URL environment variable
    # SQLite (development): Uses MEDIA_DB_PATH or default
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")

    # Environment
    ENVIRONMENT: Environment = _get_environment()


class IngestSettings(InfrastructureSettings):
    """Ingestion service configuration (inherits infrastructure settings)"""

    # Application
    APP_NAME: str = "Exercise Media Ingest Service"
    APP_VERSION: str = "1.0.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Security (required outside tests - no default)
    ADMIN_IMPORT_TOKEN: str | None = os.getenv("ADMIN_IMPORT_TOKEN")

    # Media store (SQLite path, ignored when DATABASE_URL is set)
    MEDIA_DB_PATH: str = os.getenv(
        "MEDIA_DB_PATH", str(InfrastructureSettings.DATA_DIR / "media.db")
    )

    # Crawler Behavior
    CRAWL_USER_AGENT: str = os.getenv(
        "CRAWL_USER_AGENT", "Mozilla/5.0 (compatible; ExerciseMediaIngest/1.0)"
    )
    CRAWL_TIMEOUT_SEC: int = int(os.getenv("CRAWL_TIMEOUT_SEC", "10"))
    CRAWL_OUTLINKS_PER_PAGE: int = int(os.getenv("CRAWL_OUTLINKS_PER_PAGE", "100"))
    CRAWL_SAME_HOST_ONLY: bool = _get_bool("CRAWL_SAME_HOST_ONLY", "true")
    CRAWL_MAX_RUNTIME_SEC: int = int(os.getenv("CRAWL_MAX_RUNTIME_SEC", "0"))
    CRAWL_MAX_RESPONSE_BYTES: int = int(
        os.getenv("CRAWL_MAX_RESPONSE_BYTES", str(10 * 1024 * 1024))
    )

    # Scheduled relay (cron -> ingest endpoint)
    INGEST_SITE_URL: str | None = os.getenv("INGEST_SITE_URL")
    ADMIN_INGEST_SEEDS: list[str] = [
        s.strip() for s in os.getenv("ADMIN_INGEST_SEEDS", "").split(",") if s.strip()
    ]
    ADMIN_INGEST_DEPTH: int = int(os.getenv("ADMIN_INGEST_DEPTH", "2"))
    ADMIN_INGEST_DELAY_MS: int = int(os.getenv("ADMIN_INGEST_DELAY_MS", "300"))
    ADMIN_INGEST_MAXPAGES: int = int(os.getenv("ADMIN_INGEST_MAXPAGES", "500"))
    RELAY_TIMEOUT_SEC: float = float(os.getenv("RELAY_TIMEOUT_SEC", "900"))


settings = IngestSettings()


def _validate_required(settings: IngestSettings) -> None:
    """Validate required settings outside of tests."""
    if settings.ENVIRONMENT == Environment.TEST:
        return

    if not settings.ADMIN_IMPORT_TOKEN:
        raise RuntimeError("Missing required environment variable: ADMIN_IMPORT_TOKEN")


_validate_required(settings)
