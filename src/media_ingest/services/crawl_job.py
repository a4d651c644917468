"""
Crawl Job

Runs one bounded breadth-first crawl: dequeue, fetch, extract, enqueue
children, until the frontier drains (Completed) or the page budget is
spent (BudgetExhausted). Accumulated candidates are then persisted once
through the upsert coordinator.

All mutable crawl state lives in a CrawlContext owned by the job, so
concurrent jobs never share a frontier or visited set.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable

from media_ingest.domain.config import CrawlConfig
from media_ingest.domain.frontier import Frontier, FrontierEmpty, FrontierEntry, VisitedSet
from media_ingest.domain.media import MediaCandidate, MediaRecord
from media_ingest.services.fetcher import Fetcher, FetchOutcome, FetchResult
from media_ingest.services.upsert import MediaError, UpsertCoordinator
from media_ingest.utils.parser import PageExtraction, extract
from media_ingest.utils.urls import get_host

logger = logging.getLogger(__name__)


class CrawlState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass(frozen=True)
class PageFailure:
    url: str
    outcome: FetchOutcome
    status_code: int | None = None
    detail: str | None = None


@dataclass(frozen=True)
class CrawlSummary:
    state: CrawlState
    pages_fetched: int
    pages_failed: int
    media_saved: int
    media_malformed: int
    elapsed_ms: int
    saved: tuple[MediaRecord, ...] = ()
    media_errors: tuple[MediaError, ...] = ()
    page_failures: tuple[PageFailure, ...] = ()
    links_discovered: int = 0
    candidates_found: int = 0
    links_rejected_depth: int = 0
    links_rejected_duplicate: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        for failure in data["page_failures"]:
            failure["outcome"] = failure["outcome"].value
        return data


@dataclass
class CrawlContext:
    """Job-scoped crawl state, passed explicitly through every step."""

    config: CrawlConfig
    frontier: Frontier
    visited: VisitedSet
    candidates: list[MediaCandidate] = field(default_factory=list)
    failures: list[PageFailure] = field(default_factory=list)
    fetched: list[FrontierEntry] = field(default_factory=list)
    pages_fetched: int = 0
    pages_failed: int = 0
    links_discovered: int = 0

    @classmethod
    def start(cls, config: CrawlConfig) -> "CrawlContext":
        visited = VisitedSet()
        frontier = Frontier(config.max_depth, visited)
        for seed in config.seeds:
            frontier.enqueue(seed, 0)
        return cls(config=config, frontier=frontier, visited=visited)


Extractor = Callable[[str, str, int, str | None], PageExtraction]


class CrawlJob:
    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Fetcher,
        coordinator: UpsertCoordinator,
        *,
        link_limit: int = 100,
        max_runtime_sec: float = 0,
        extractor: Extractor = extract,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.fetcher = fetcher
        self.coordinator = coordinator
        self.link_limit = link_limit
        self.max_runtime_sec = max_runtime_sec
        self.extractor = extractor
        self.clock = clock
        self.state = CrawlState.PENDING
        self.job_id = uuid.uuid4().hex[:8]
        self.context: CrawlContext | None = None

    async def run(self) -> CrawlSummary:
        if self.state != CrawlState.PENDING:
            raise RuntimeError(f"Crawl job {self.job_id} already started")

        self.state = CrawlState.RUNNING
        started = self.clock()
        ctx = CrawlContext.start(self.config)
        self.context = ctx
        logger.info(
            f"🚀 Crawl {self.job_id} started: seeds={len(self.config.seeds)} "
            f"max_depth={self.config.max_depth} max_pages={self.config.max_pages} "
            f"delay_ms={self.config.delay_ms}"
        )

        self.state = await self._crawl(ctx, started)

        # persist() does blocking store I/O
        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(
            None, self.coordinator.persist, ctx.candidates
        )
        elapsed_ms = int(round((self.clock() - started) * 1000))

        summary = CrawlSummary(
            state=self.state,
            pages_fetched=ctx.pages_fetched,
            pages_failed=ctx.pages_failed,
            media_saved=report.saved_count,
            media_malformed=report.malformed,
            elapsed_ms=elapsed_ms,
            saved=tuple(report.saved),
            media_errors=tuple(report.errors),
            page_failures=tuple(ctx.failures),
            links_discovered=ctx.links_discovered,
            candidates_found=len(ctx.candidates),
            links_rejected_depth=ctx.frontier.rejected_depth,
            links_rejected_duplicate=ctx.frontier.rejected_duplicate,
        )
        logger.info(
            f"✅ Crawl {self.job_id} {self.state.value}: "
            f"pages={ctx.pages_fetched} failed={ctx.pages_failed} "
            f"saved={summary.media_saved} errors={len(summary.media_errors)} "
            f"elapsed={elapsed_ms}ms"
        )
        return summary

    def _deadline_passed(self, started: float) -> bool:
        if self.max_runtime_sec <= 0:
            return False
        return self.clock() - started >= self.max_runtime_sec

    async def _crawl(self, ctx: CrawlContext, started: float) -> CrawlState:
        while True:
            if ctx.pages_fetched >= self.config.max_pages:
                logger.info(
                    f"Crawl {self.job_id}: page budget of {self.config.max_pages} spent "
                    f"({len(ctx.frontier)} entries left in frontier)"
                )
                return CrawlState.BUDGET_EXHAUSTED

            if self._deadline_passed(started):
                logger.warning(
                    f"Crawl {self.job_id}: runtime limit of {self.max_runtime_sec}s reached"
                )
                return CrawlState.BUDGET_EXHAUSTED

            try:
                entry = ctx.frontier.dequeue()
            except FrontierEmpty:
                return CrawlState.COMPLETED

            await self._visit(ctx, entry)

    async def _visit(self, ctx: CrawlContext, entry: FrontierEntry) -> None:
        logger.info(f"Processing: {entry.url} (depth={entry.depth})")
        result = await self.fetcher.fetch(entry.url)
        ctx.pages_fetched += 1
        ctx.fetched.append(entry)

        if result.outcome == FetchOutcome.SUCCESS:
            await self._handle_page(ctx, entry, result)
        elif result.outcome in (
            FetchOutcome.TIMEOUT,
            FetchOutcome.NETWORK_ERROR,
            FetchOutcome.HTTP_ERROR,
        ):
            ctx.pages_failed += 1
            ctx.failures.append(
                PageFailure(
                    url=entry.url,
                    outcome=result.outcome,
                    status_code=result.status_code,
                    detail=result.detail,
                )
            )
        else:
            raise ValueError(f"Unknown fetch outcome: {result.outcome}")

    async def _handle_page(
        self, ctx: CrawlContext, entry: FrontierEntry, result: FetchResult
    ) -> None:
        # Host policy is applied inside extraction, before the per-page cap
        link_host = get_host(entry.url) if self.config.same_host_only else None
        loop = asyncio.get_running_loop()
        extraction = await loop.run_in_executor(
            None, self.extractor, result.content, entry.url, self.link_limit, link_host
        )

        ctx.candidates.extend(extraction.candidates)

        child_depth = entry.depth + 1
        enqueued = 0
        for link in extraction.links:
            ctx.links_discovered += 1
            if ctx.frontier.enqueue(link, child_depth, parent=entry.url):
                enqueued += 1

        logger.debug(
            f"{entry.url}: {len(extraction.candidates)} media, "
            f"{len(extraction.links)} links ({enqueued} enqueued)"
        )
