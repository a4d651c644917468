"""
Crawl Configuration

Resolves caller-supplied crawl parameters (each optional) into a validated,
immutable CrawlConfig. Pure: no settings lookup, no I/O.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from media_ingest.utils.urls import normalize_url

DEFAULT_SEEDS: tuple[str, ...] = (
    "https://www.muscleandstrength.com/workout-routines",
    "https://www.fitnessblender.com/videos?focus[]=1&focus[]=2&focus[]=3&focus[]=4",
)
DEFAULT_MAX_DEPTH = 2
DEFAULT_MAX_PAGES = 500
DEFAULT_DELAY_MS = 300


class InvalidConfig(ValueError):
    """Raised when crawl parameters are malformed or empty."""


@dataclass(frozen=True)
class CrawlConfig:
    seeds: tuple[str, ...]
    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages: int = DEFAULT_MAX_PAGES
    delay_ms: int = DEFAULT_DELAY_MS
    same_host_only: bool = True

    @property
    def delay_sec(self) -> float:
        return self.delay_ms / 1000.0


def _coerce_int(field: str, value: Any, default: int, minimum: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidConfig(f"{field} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidConfig(f"{field} must be an integer")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidConfig(f"{field} must be an integer, got '{value}'")
    elif not isinstance(value, int):
        raise InvalidConfig(f"{field} must be an integer")

    if value < 0:
        raise InvalidConfig(f"{field} must not be negative (got {value})")
    if value < minimum:
        raise InvalidConfig(f"{field} must be at least {minimum} (got {value})")
    return value


def _resolve_seeds(
    raw_seeds: Iterable[Any] | str | None, fallback: Iterable[str]
) -> tuple[str, ...]:
    if isinstance(raw_seeds, str):
        raw_seeds = [raw_seeds]

    trimmed: list[str] = []
    for seed in raw_seeds or []:
        if not isinstance(seed, str):
            raise InvalidConfig("seeds must be a list of URL strings")
        seed = seed.strip()
        if seed:
            trimmed.append(seed)

    if not trimmed:
        trimmed = [s.strip() for s in fallback if s and s.strip()]

    seeds: list[str] = []
    for seed in trimmed:
        normalized = normalize_url(seed, seed)
        if normalized is None:
            raise InvalidConfig(f"Invalid seed URL: '{seed}'")
        if normalized not in seeds:
            seeds.append(normalized)

    if not seeds:
        raise InvalidConfig("seeds required")
    return tuple(seeds)


def resolve_crawl_config(
    seeds: Iterable[Any] | str | None = None,
    max_depth: Any = None,
    max_pages: Any = None,
    delay_ms: Any = None,
    *,
    same_host_only: bool = True,
    default_seeds: Iterable[str] = DEFAULT_SEEDS,
) -> CrawlConfig:
    """
    Build a validated CrawlConfig.

    Absent values take the defaults (depth 2, 500 pages, 300 ms, the
    fallback seed list). Negative numbers, a page budget below one and
    non-http(s) seeds raise InvalidConfig. Seeds are trimmed, normalized
    and deduplicated preserving order.
    """
    return CrawlConfig(
        seeds=_resolve_seeds(seeds, default_seeds),
        max_depth=_coerce_int("maxDepth", max_depth, DEFAULT_MAX_DEPTH, 0),
        max_pages=_coerce_int("maxPages", max_pages, DEFAULT_MAX_PAGES, 1),
        delay_ms=_coerce_int("delayMs", delay_ms, DEFAULT_DELAY_MS, 0),
        same_host_only=same_host_only,
    )
