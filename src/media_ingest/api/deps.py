"""
API Dependencies

Dependency injection for FastAPI routes.
"""

from media_ingest.core.config import settings
from media_ingest.db.media_store import SqlMediaStore
from media_ingest.services.admin import AdminTrigger, TokenAuthorizer

# Lazy-initialized instances
_media_store: SqlMediaStore | None = None


def get_media_store() -> SqlMediaStore:
    """Get or create SqlMediaStore instance."""
    global _media_store
    if _media_store is None:
        _media_store = SqlMediaStore(settings.MEDIA_DB_PATH)
    return _media_store


def reset_media_store() -> None:
    global _media_store
    _media_store = None


def get_admin_trigger() -> AdminTrigger:
    """Get admin trigger bound to the configured token and media store"""
    return AdminTrigger(
        TokenAuthorizer(settings.ADMIN_IMPORT_TOKEN),
        get_media_store(),
        user_agent=settings.CRAWL_USER_AGENT,
        timeout_sec=settings.CRAWL_TIMEOUT_SEC,
        link_limit=settings.CRAWL_OUTLINKS_PER_PAGE,
        same_host_only=settings.CRAWL_SAME_HOST_ONLY,
        max_runtime_sec=settings.CRAWL_MAX_RUNTIME_SEC,
        max_response_bytes=settings.CRAWL_MAX_RESPONSE_BYTES,
    )
