"""
Exercise Media Request/Response Models

Pydantic models for the admin ingestion endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field


class IngestRequest(BaseModel):
    """Crawl parameters; every field is optional and defaults server-side"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    seeds: list[str] | None = Field(
        default=None,
        description="Start URLs (fallback list used when absent or empty)",
        examples=[["https://www.muscleandstrength.com/workout-routines"]],
    )
    max_depth: int | None = Field(
        default=None, alias="maxDepth", description="Hop limit from seeds (default 2)"
    )
    max_pages: int | None = Field(
        default=None,
        alias="maxPages",
        description="Fetch attempts allowed, failures included (default 500)",
    )
    delay_ms: int | None = Field(
        default=None,
        alias="delayMs",
        description="Minimum milliseconds between fetch starts (default 300)",
    )


class MediaItem(BaseModel):
    """Single manual media entry"""

    name: str | None = None
    video_url: str | None = None


class MediaRecordOut(BaseModel):
    name: str
    video_url: str
    updated_at: int


class MediaErrorOut(BaseModel):
    name: str
    video_url: str
    error: str


class PageFailureOut(BaseModel):
    url: str
    outcome: str
    status_code: int | None = None
    detail: str | None = None


class IngestResponse(BaseModel):
    """Summary of one crawl job"""

    success: bool = True
    state: str = Field(..., description="completed or budget_exhausted")
    pages_fetched: int = Field(..., ge=0)
    pages_failed: int = Field(..., ge=0)
    media_saved: int = Field(..., ge=0)
    media_malformed: int = Field(default=0, ge=0)
    links_discovered: int = Field(default=0, ge=0)
    links_rejected_depth: int = Field(default=0, ge=0)
    links_rejected_duplicate: int = Field(default=0, ge=0)
    elapsed_ms: int = Field(..., ge=0)
    saved: list[MediaRecordOut] = Field(default_factory=list)
    errors: list[MediaErrorOut] = Field(default_factory=list)
    page_failures: list[PageFailureOut] = Field(default_factory=list)


class BulkUpsertResponse(BaseModel):
    success: bool = True
    saved: list[MediaRecordOut] = Field(default_factory=list)
    errors: list[MediaErrorOut] = Field(default_factory=list)
    skipped: int = Field(default=0, ge=0)


class MediaListResponse(BaseModel):
    media: list[MediaRecordOut] = Field(default_factory=list)
