"""
Crawl domain: configuration, frontier and visited-set bookkeeping.
"""

from media_ingest.domain.config import CrawlConfig, InvalidConfig, resolve_crawl_config
from media_ingest.domain.frontier import Frontier, FrontierEmpty, FrontierEntry, VisitedSet

__all__ = [
    "CrawlConfig",
    "InvalidConfig",
    "resolve_crawl_config",
    "Frontier",
    "FrontierEmpty",
    "FrontierEntry",
    "VisitedSet",
]
