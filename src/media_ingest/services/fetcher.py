"""
Fetcher

Issues one outbound request at a time and classifies the outcome instead
of raising. Consecutive fetch starts are spaced by at least the job's
politeness delay, including after failures.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

import aiohttp

logger = logging.getLogger(__name__)

# Maximum response size (10 MB)
MAX_RESPONSE_SIZE = 10 * 1024 * 1024
MAX_ERROR_DETAIL_LENGTH = 240
READ_CHUNK_SIZE = 64 * 1024


class FetchOutcome(str, Enum):
    SUCCESS = "success"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"


@dataclass(frozen=True)
class FetchResult:
    url: str
    outcome: FetchOutcome
    status_code: int | None = None
    content: str = ""
    content_type: str = ""
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == FetchOutcome.SUCCESS


def _short(text: str) -> str:
    normalized = " ".join(str(text).split())
    if len(normalized) > MAX_ERROR_DETAIL_LENGTH:
        return normalized[: MAX_ERROR_DETAIL_LENGTH - 3] + "..."
    return normalized


class Fetcher:
    """
    Paced single-flight HTTP fetcher bound to one crawl job.

    The pacing window is measured from the start of the previous fetch and
    is global to the job, not per host.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        delay_ms: int = 0,
        timeout_sec: float = 10,
        max_response_bytes: int = MAX_RESPONSE_SIZE,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._session = session
        self.delay_sec = max(delay_ms, 0) / 1000.0
        self.timeout_sec = timeout_sec
        self.max_response_bytes = max_response_bytes
        self._clock = clock
        self._sleep = sleep
        self._last_start: float | None = None
        self._lock = asyncio.Lock()
        self.attempts = 0

    async def _wait_turn(self) -> None:
        if self._last_start is not None and self.delay_sec > 0:
            remaining = self._last_start + self.delay_sec - self._clock()
            if remaining > 0:
                await self._sleep(remaining)
        self._last_start = self._clock()

    async def fetch(self, url: str) -> FetchResult:
        """Fetch url once; never raises for expected failure paths."""
        async with self._lock:
            await self._wait_turn()
            self.attempts += 1
            return await self._fetch(url)

    async def _read_body(self, resp: aiohttp.ClientResponse) -> tuple[bytes, bool]:
        """Read the body to EOF or max_response_bytes; returns (body, truncated)."""
        chunks: list[bytes] = []
        size = 0
        async for chunk in resp.content.iter_chunked(READ_CHUNK_SIZE):
            remaining = self.max_response_bytes - size
            if len(chunk) > remaining:
                chunks.append(chunk[:remaining])
                return b"".join(chunks), True
            chunks.append(chunk)
            size += len(chunk)
        return b"".join(chunks), False

    async def _fetch(self, url: str) -> FetchResult:
        timeout = aiohttp.ClientTimeout(total=self.timeout_sec)
        try:
            async with self._session.get(
                url, timeout=timeout, allow_redirects=True
            ) as resp:
                content_type = resp.headers.get("Content-Type", "").lower()

                if not 200 <= resp.status < 300:
                    logger.warning(f"HTTP error {resp.status} for {url}")
                    return FetchResult(
                        url=url,
                        outcome=FetchOutcome.HTTP_ERROR,
                        status_code=resp.status,
                        content_type=content_type,
                        detail=f"HTTP {resp.status}",
                    )

                body, truncated = await self._read_body(resp)
                if truncated:
                    logger.warning(
                        f"Response truncated at {self.max_response_bytes} bytes: {url}"
                    )

                return FetchResult(
                    url=url,
                    outcome=FetchOutcome.SUCCESS,
                    status_code=resp.status,
                    content=body.decode("utf-8", errors="replace"),
                    content_type=content_type,
                )

        except (asyncio.TimeoutError, TimeoutError) as e:
            logger.warning(f"Timeout after {self.timeout_sec}s for {url}")
            return FetchResult(
                url=url,
                outcome=FetchOutcome.TIMEOUT,
                detail=_short(f"Timeout: {e}" if str(e) else "Timeout"),
            )

        except (aiohttp.ClientError, OSError, ValueError) as e:
            logger.warning(f"Network error for {url}: {e}")
            return FetchResult(
                url=url,
                outcome=FetchOutcome.NETWORK_ERROR,
                detail=_short(f"{type(e).__name__}: {e}"),
            )

        except Exception as e:
            logger.error(f"Unexpected error fetching {url}: {e}", exc_info=True)
            return FetchResult(
                url=url,
                outcome=FetchOutcome.NETWORK_ERROR,
                detail=_short(f"Unexpected error: {e}"),
            )
