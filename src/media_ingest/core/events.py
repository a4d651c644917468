"""
Application Lifecycle Events

Manages FastAPI lifespan events for startup and shutdown.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager

    Startup: create the media store schema so the first ingest does not pay
    for it. Crawl jobs are request-scoped; nothing runs in the background.
    """
    logger.info("🚀 Starting Exercise Media Ingest Service...")

    # Import here to avoid circular dependencies
    from media_ingest.api.deps import get_media_store

    store = get_media_store()
    logger.info(f"✅ Media store ready ({store.count()} records)")

    yield  # Application runs here

    logger.info("✅ Shutdown complete")
