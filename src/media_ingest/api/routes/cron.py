"""
Cron Router

Entry point for an external scheduler: relays the configured crawl to the
ingest endpoint.
"""

import logging

import httpx
from fastapi import APIRouter, HTTPException

from media_ingest.core.config import settings
from media_ingest.services.relay import RelayConfigError, trigger_ingest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron")


@router.get("/ingest")
async def cron_ingest():
    """Forward the scheduled crawl configuration to the ingest endpoint."""
    try:
        result = await trigger_ingest(settings)
    except RelayConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except httpx.HTTPError as e:
        logger.error(f"Cron ingest error: {e}")
        raise HTTPException(status_code=502, detail=f"Ingest relay failed: {str(e)}")
    return {"status": result.status, "data": result.data}
