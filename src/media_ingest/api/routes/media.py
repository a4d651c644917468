"""
Exercise Media Admin Router

Token-gated ingestion (crawl), bulk manual upsert, list and single upsert.
All endpoints require the X-Admin-Token header.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException

from media_ingest.api.deps import get_admin_trigger
from media_ingest.domain.config import InvalidConfig
from media_ingest.models.media import (
    BulkUpsertResponse,
    IngestRequest,
    IngestResponse,
    MediaItem,
    MediaListResponse,
    MediaRecordOut,
)
from media_ingest.services.admin import AdminTrigger, Unauthorized

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/exercises/media")


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=401, detail="Unauthorized")


@router.post("/ingest", response_model=IngestResponse)
async def ingest_media(
    request: IngestRequest | None = None,
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    trigger: AdminTrigger = Depends(get_admin_trigger),
):
    """
    Crawl seed pages breadth-first and upsert discovered exercise videos.

    Runs one bounded crawl job to completion and returns its summary.
    Page and persist failures are reported, not raised.
    """
    raw = request.model_dump(exclude_none=True) if request else {}
    try:
        summary = await trigger.run_ingest(x_admin_token, raw)
    except Unauthorized:
        raise _unauthorized()
    except InvalidConfig as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Ingest error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Ingestion failed: {str(e)}")

    data = summary.to_dict()
    return IngestResponse(
        success=True,
        state=data["state"],
        pages_fetched=data["pages_fetched"],
        pages_failed=data["pages_failed"],
        media_saved=data["media_saved"],
        media_malformed=data["media_malformed"],
        links_discovered=data["links_discovered"],
        links_rejected_depth=data["links_rejected_depth"],
        links_rejected_duplicate=data["links_rejected_duplicate"],
        elapsed_ms=data["elapsed_ms"],
        saved=list(data["saved"]),
        errors=list(data["media_errors"]),
        page_failures=list(data["page_failures"]),
    )


@router.post("/bulk", response_model=BulkUpsertResponse)
async def bulk_upsert_media(
    items: Any = Body(default=None),
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    trigger: AdminTrigger = Depends(get_admin_trigger),
):
    """
    Upsert a JSON array of {name, video_url} without crawling.

    Entries missing either field are skipped.
    """
    try:
        trigger.authorizer.check(x_admin_token)
    except Unauthorized:
        raise _unauthorized()

    if not isinstance(items, list) or not items:
        raise HTTPException(status_code=400, detail="No items provided")

    try:
        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(
            None, trigger.bulk_upsert, x_admin_token, items
        )
    except Exception as e:
        logger.error(f"Exercise media bulk upsert error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Bulk upsert failed: {str(e)}")

    return BulkUpsertResponse(
        success=True,
        saved=[MediaRecordOut(**r.to_dict()) for r in report.saved],
        errors=[asdict(e) for e in report.errors],
        skipped=report.malformed,
    )


@router.get("", response_model=MediaListResponse)
async def list_media(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    trigger: AdminTrigger = Depends(get_admin_trigger),
):
    """List all stored exercise media records."""
    try:
        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(None, trigger.list_media, x_admin_token)
    except Unauthorized:
        raise _unauthorized()
    return MediaListResponse(media=[MediaRecordOut(**r.to_dict()) for r in records])


@router.post("", response_model=MediaRecordOut)
async def upsert_media(
    item: MediaItem,
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    trigger: AdminTrigger = Depends(get_admin_trigger),
):
    """Insert or replace the video URL for one exercise name."""
    try:
        trigger.authorizer.check(x_admin_token)
    except Unauthorized:
        raise _unauthorized()

    if not (item.name and item.name.strip()) or not (
        item.video_url and item.video_url.strip()
    ):
        raise HTTPException(status_code=400, detail="name and video_url required")

    try:
        loop = asyncio.get_running_loop()
        record = await loop.run_in_executor(
            None, trigger.upsert_one, x_admin_token, item.name, item.video_url
        )
    except Exception as e:
        logger.error(f"Exercise media upsert error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Upsert failed: {str(e)}")
    return MediaRecordOut(**record.to_dict())
