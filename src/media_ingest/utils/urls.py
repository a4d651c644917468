"""
URL Utilities

Canonical form for crawl URLs: absolute http(s), no fragment, lower-cased
scheme and host, common tracking parameters removed.
"""

from urllib.parse import parse_qsl, urldefrag, urlencode, urljoin, urlsplit, urlunsplit
from typing import Optional

MAX_URL_LENGTH = 2083

TRACKING_KEYS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "gclid",
    "fbclid",
}


def normalize_url(base: str, link: str | None) -> Optional[str]:
    if not link:
        return None
    link = link.strip()
    if not link:
        return None
    try:
        href = urljoin(base, link)
        href, _ = urldefrag(href)
        if not href.startswith(("http://", "https://")):
            return None
        if len(href) > MAX_URL_LENGTH:
            return None
        # lower scheme/host & strip common tracking params
        parts = urlsplit(href)
        host = (parts.hostname or "").lower()
        if not host:
            return None
        port = f":{parts.port}" if parts.port else ""
    except ValueError:
        # malformed netloc / port
        return None
    query = urlencode(
        [
            (k, v)
            for k, v in parse_qsl(parts.query, keep_blank_values=True)
            if k not in TRACKING_KEYS
        ]
    )
    path = parts.path or "/"
    normalized = urlunsplit((parts.scheme.lower(), host + port, path, query, ""))
    if len(normalized) > MAX_URL_LENGTH:
        return None
    return normalized


def is_http_url(value: str | None) -> bool:
    """True for syntactically valid absolute http(s) URLs."""
    if not value or not isinstance(value, str):
        return False
    try:
        parts = urlsplit(value.strip())
        return parts.scheme in ("http", "https") and bool(parts.hostname)
    except ValueError:
        return False


def get_host(url: str) -> str:
    """Extract lower-cased host from URL."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""
