"""
Admin Trigger

Token-gated entry points for ingestion: run one crawl job, bulk-upsert
manual corrections, list or upsert single media records. The token check
happens before any crawling, fetching or persisting.
"""

import logging
import secrets
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Iterable, Mapping

import aiohttp

from media_ingest.db.media_store import MediaStore
from media_ingest.domain.config import DEFAULT_SEEDS, resolve_crawl_config
from media_ingest.domain.media import MediaCandidate, MediaRecord
from media_ingest.services.crawl_job import CrawlJob, CrawlSummary
from media_ingest.services.fetcher import MAX_RESPONSE_SIZE, Fetcher
from media_ingest.services.upsert import UpsertCoordinator, UpsertReport

logger = logging.getLogger(__name__)


class Unauthorized(Exception):
    """Raised when the capability token is missing or wrong."""


class TokenAuthorizer:
    """Compares a presented token with the expected capability token."""

    def __init__(self, expected_token: str | None):
        self._expected = expected_token or ""

    def check(self, token: str | None) -> None:
        # No configured token means nothing is admitted
        if not self._expected or not token:
            raise Unauthorized("Unauthorized")
        if not secrets.compare_digest(token.encode(), self._expected.encode()):
            raise Unauthorized("Unauthorized")


SessionFactory = Callable[[], Any]


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


class AdminTrigger:
    def __init__(
        self,
        authorizer: TokenAuthorizer,
        store: MediaStore,
        *,
        session_factory: SessionFactory | None = None,
        user_agent: str = "ExerciseMediaIngest/1.0",
        timeout_sec: float = 10,
        link_limit: int = 100,
        same_host_only: bool = True,
        max_runtime_sec: float = 0,
        max_response_bytes: int = MAX_RESPONSE_SIZE,
        default_seeds: Iterable[str] = DEFAULT_SEEDS,
    ):
        self.authorizer = authorizer
        self.store = store
        self.session_factory = session_factory or self._default_session
        self.user_agent = user_agent
        self.timeout_sec = timeout_sec
        self.link_limit = link_limit
        self.same_host_only = same_host_only
        self.max_runtime_sec = max_runtime_sec
        self.max_response_bytes = max_response_bytes
        self.default_seeds = tuple(default_seeds)

    @asynccontextmanager
    async def _default_session(self) -> AsyncIterator[aiohttp.ClientSession]:
        connector = aiohttp.TCPConnector(
            limit=1,
            ttl_dns_cache=300,
            enable_cleanup_closed=True,
        )
        async with aiohttp.ClientSession(
            headers={"User-Agent": self.user_agent}, connector=connector
        ) as session:
            yield session

    async def run_ingest(
        self, token: str | None, raw: Mapping[str, Any] | None = None
    ) -> CrawlSummary:
        """Authorize, resolve the crawl config, run one crawl job to completion."""
        self.authorizer.check(token)

        raw = raw or {}
        config = resolve_crawl_config(
            seeds=_pick(raw, "seeds"),
            max_depth=_pick(raw, "maxDepth", "max_depth"),
            max_pages=_pick(raw, "maxPages", "max_pages"),
            delay_ms=_pick(raw, "delayMs", "delay_ms"),
            same_host_only=self.same_host_only,
            default_seeds=self.default_seeds,
        )

        async with self.session_factory() as session:
            fetcher = Fetcher(
                session,
                delay_ms=config.delay_ms,
                timeout_sec=self.timeout_sec,
                max_response_bytes=self.max_response_bytes,
            )
            job = CrawlJob(
                config,
                fetcher,
                UpsertCoordinator(self.store),
                link_limit=self.link_limit,
                max_runtime_sec=self.max_runtime_sec,
            )
            return await job.run()

    def bulk_upsert(self, token: str | None, items: Iterable[Any]) -> UpsertReport:
        """Route (name, video_url) pairs straight to the coordinator."""
        self.authorizer.check(token)

        candidates = []
        for item in items:
            if isinstance(item, Mapping):
                candidates.append(
                    MediaCandidate(
                        name=item.get("name") or "",
                        video_url=item.get("video_url") or "",
                    )
                )
            else:
                candidates.append(MediaCandidate(name="", video_url=""))

        return UpsertCoordinator(self.store).persist(candidates)

    def upsert_one(self, token: str | None, name: str, video_url: str) -> MediaRecord:
        self.authorizer.check(token)
        return self.store.upsert(name.strip(), video_url.strip())

    def list_media(self, token: str | None) -> list[MediaRecord]:
        self.authorizer.check(token)
        return self.store.list_all()
