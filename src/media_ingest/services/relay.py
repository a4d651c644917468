"""
Scheduled Ingest Relay

Reads the crawl parameters from configuration and forwards them, with the
shared admin token, to the ingest endpoint. Performs no crawling itself.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from media_ingest.core.config import IngestSettings, settings as default_settings
from media_ingest.domain.config import DEFAULT_SEEDS

logger = logging.getLogger(__name__)

INGEST_PATH = "/api/v1/admin/exercises/media/ingest"


class RelayConfigError(RuntimeError):
    """Raised when the relay target or token is not configured."""


@dataclass(frozen=True)
class RelayResult:
    status: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def build_relay_payload(settings: IngestSettings = default_settings) -> dict[str, Any]:
    seeds = list(settings.ADMIN_INGEST_SEEDS) or list(DEFAULT_SEEDS)
    return {
        "seeds": seeds,
        "maxDepth": settings.ADMIN_INGEST_DEPTH,
        "delayMs": settings.ADMIN_INGEST_DELAY_MS,
        "maxPages": settings.ADMIN_INGEST_MAXPAGES,
    }


async def trigger_ingest(
    settings: IngestSettings = default_settings,
    client: httpx.AsyncClient | None = None,
) -> RelayResult:
    """
    POST the configured crawl to {INGEST_SITE_URL}/api/v1/admin/exercises/media/ingest.

    Raises:
        RelayConfigError: If INGEST_SITE_URL or ADMIN_IMPORT_TOKEN is missing.
        httpx.HTTPError: On transport failure.
    """
    site = settings.INGEST_SITE_URL
    token = settings.ADMIN_IMPORT_TOKEN
    if not site or not token:
        raise RelayConfigError("Missing env")

    url = f"{site.rstrip('/')}{INGEST_PATH}"
    payload = build_relay_payload(settings)
    headers = {"X-Admin-Token": token, "Content-Type": "application/json"}

    logger.info(f"Relaying scheduled ingest to {url} ({len(payload['seeds'])} seeds)")
    if client is None:
        async with httpx.AsyncClient(timeout=settings.RELAY_TIMEOUT_SEC) as owned:
            resp = await owned.post(url, json=payload, headers=headers)
    else:
        resp = await client.post(url, json=payload, headers=headers)

    try:
        data = resp.json()
    except ValueError:
        data = {}

    if resp.status_code >= 400:
        logger.warning(f"Ingest relay got HTTP {resp.status_code}")
    return RelayResult(status=resp.status_code, data=data)
