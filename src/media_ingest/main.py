"""
Main Application Entry Point

FastAPI application factory and router registration.
"""

import uvicorn
from fastapi import FastAPI

from media_ingest.api.routes import cron, health, media
from media_ingest.api.routes.health import root_router as health_root_router
from media_ingest.core.config import settings
from media_ingest.core.events import lifespan


def create_app() -> FastAPI:
    """
    FastAPI application factory

    Creates and configures the FastAPI application with all routers.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Exercise video ingestion crawler",
        lifespan=lifespan,
    )

    # Root-level health endpoints (Kubernetes probes)
    app.include_router(health_root_router, tags=["health"])

    # Register routers with /api/v1 prefix
    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(media.router, prefix="/api/v1", tags=["media"])
    app.include_router(cron.router, prefix="/api/v1", tags=["cron"])

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "media_ingest.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
