"""
Health Check Router

Provides Kubernetes-compatible health check endpoints:
- /health: Simple health for load balancers
- /health/live: Liveness probe (process alive)
- /health/ready: Readiness probe (media store reachable)
"""

import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from media_ingest.api.deps import get_media_store

logger = logging.getLogger(__name__)

# Router for /api/v1 prefix
router = APIRouter()

# Router for root-level health endpoints
root_router = APIRouter()


def _check_media_store() -> bool:
    """Check media store connectivity."""
    try:
        get_media_store().count()
        return True
    except Exception as e:
        logger.warning(f"Media store health check failed: {e}")
        return False


# --- Root-level endpoints (Kubernetes probes) ---


@root_router.get("/health")
async def health():
    """Simple health check for load balancers."""
    return {"status": "ok"}


@root_router.get("/health/live")
async def liveness():
    """Kubernetes liveness probe - is the process running?"""
    return {"status": "ok"}


@root_router.get("/health/ready")
async def readiness():
    """Kubernetes readiness probe - are dependencies healthy?"""
    loop = asyncio.get_running_loop()
    store_ok = await loop.run_in_executor(None, _check_media_store)
    checks = {"media_store": "ok" if store_ok else "unhealthy"}

    all_healthy = all(v == "ok" for v in checks.values())
    status = "ok" if all_healthy else "unhealthy"

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": status, "checks": checks},
    )


# --- /api/v1 endpoints ---


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
