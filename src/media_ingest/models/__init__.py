"""
Models package initialization
"""

from media_ingest.models.media import (
    BulkUpsertResponse,
    IngestRequest,
    IngestResponse,
    MediaErrorOut,
    MediaItem,
    MediaListResponse,
    MediaRecordOut,
)

__all__ = [
    "BulkUpsertResponse",
    "IngestRequest",
    "IngestResponse",
    "MediaErrorOut",
    "MediaItem",
    "MediaListResponse",
    "MediaRecordOut",
]
