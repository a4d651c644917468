"""
HTML Parser Utilities

Extracts exercise media candidates and outbound links from fetched pages.

A candidate is only emitted when a video URL and a plausible exercise
label sit in the same content block (or the page holds a single video and
carries its own label). Unparseable content yields nothing.
"""

import logging
import re
import warnings
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urljoin, urlsplit

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, Tag

from media_ingest.domain.media import MediaCandidate
from media_ingest.utils.urls import get_host, normalize_url

warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

logger = logging.getLogger(__name__)

YOUTUBE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{5,}$")
VIMEO_ID_RE = re.compile(r"^\d{3,}$")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".m3u8")

BLOCK_TAGS = {"article", "section", "figure", "li", "div", "td", "tr"}
STOP_TAGS = {"body", "html", "[document]", "main"}
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
LABEL_ATTRS = ("data-exercise", "data-exercise-name", "data-name", "data-title")
LABEL_CLASSES = re.compile(r"exercise[-_]?(name|title)", re.I)
MAX_BLOCK_ASCENT = 4
MAX_LABEL_LENGTH = 120
MAX_LABEL_WORDS = 12

GENERIC_LABELS = {
    "youtube",
    "youtube video",
    "youtube video player",
    "vimeo",
    "vimeo video player",
    "video",
    "video player",
    "embedded video",
    "play",
    "play video",
    "watch",
    "watch video",
    "watch now",
    "click here",
    "here",
    "more",
    "read more",
}


@dataclass
class PageExtraction:
    candidates: list[MediaCandidate] = field(default_factory=list)
    links: list[str] = field(default_factory=list)


def _strip_nul(text: str) -> str:
    return text.replace("\x00", " ")


def canonical_video_url(base_url: str, raw: str | None) -> str | None:
    """
    Resolve raw against base_url and return a canonical video URL.

    YouTube watch/short/youtu.be links collapse to the embed form; Vimeo
    links to the player form. Direct video files are kept as resolved.
    Anything else returns None.
    """
    if not raw:
        return None
    try:
        absolute = urljoin(base_url, raw.strip())
        parts = urlsplit(absolute)
        host = (parts.hostname or "").lower()
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not host:
        return None

    for prefix in ("www.", "m."):
        if host.startswith(prefix):
            host = host[len(prefix) :]

    segments = [s for s in parts.path.split("/") if s]

    video_id = None
    if host in ("youtube.com", "youtube-nocookie.com"):
        if len(segments) >= 2 and segments[0] in ("embed", "shorts", "v", "live"):
            video_id = segments[1]
        elif segments[:1] == ["watch"]:
            video_id = (parse_qs(parts.query).get("v") or [None])[0]
    elif host == "youtu.be" and segments:
        video_id = segments[0]

    if video_id is not None:
        if YOUTUBE_ID_RE.match(video_id):
            return f"https://www.youtube.com/embed/{video_id}"
        return None

    if host == "player.vimeo.com" and len(segments) >= 2 and segments[0] == "video":
        vimeo_id = segments[1]
    elif host == "vimeo.com" and segments:
        vimeo_id = segments[-1]
    else:
        vimeo_id = None
    if vimeo_id is not None:
        if VIMEO_ID_RE.match(vimeo_id):
            return f"https://player.vimeo.com/video/{vimeo_id}"
        return None

    if parts.path.lower().endswith(VIDEO_EXTENSIONS):
        return absolute.split("#", 1)[0]
    return None


def clean_label(text: str | None) -> str | None:
    """Reduce a title/heading to a plausible exercise name, or None."""
    if not text:
        return None
    label = _strip_nul(text)
    label = label.split("|")[0]
    # drop " - Site Name" style suffixes
    label = re.split(r"\s+[-–—]\s+", label)[0]
    label = label.replace("-", " ")
    label = re.sub(r"\s+", " ", label).strip(" :·\t\r\n")
    if len(label) > MAX_LABEL_LENGTH:
        label = label[:MAX_LABEL_LENGTH].rsplit(" ", 1)[0]

    if len(label) < 2 or not re.search(r"[^\W\d_]", label):
        return None
    if label.lower() in GENERIC_LABELS:
        return None
    if label.lower().startswith(("http://", "https://", "www.")):
        return None
    if len(label.split()) > MAX_LABEL_WORDS:
        return None
    return label


def _attr(tag: Tag, name: str) -> str | None:
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value


def _video_sources(soup: BeautifulSoup) -> list[tuple[Tag, str]]:
    found: list[tuple[Tag, str]] = []
    for tag in soup.find_all(["iframe", "video", "source", "a", "embed"]):
        if tag.name == "iframe":
            raws = [_attr(tag, "src"), _attr(tag, "data-src")]
        elif tag.name == "a":
            raws = [_attr(tag, "href")]
        else:
            raws = [_attr(tag, "src"), _attr(tag, "data-src")]
        for raw in raws:
            if raw:
                # <source> labels come from its <video>
                owner = tag.parent if tag.name == "source" and tag.parent else tag
                found.append((owner, raw))
    return found


def _own_label(tag: Tag) -> str | None:
    for attr in LABEL_ATTRS:
        label = clean_label(_attr(tag, attr))
        if label:
            return label
    if tag.name == "a":
        label = clean_label(tag.get_text(" ", strip=True))
        if label:
            return label
    return clean_label(_attr(tag, "title")) or clean_label(_attr(tag, "aria-label"))


def _block_label(block: Tag) -> str | None:
    for attr in LABEL_ATTRS:
        label = clean_label(_attr(block, attr))
        if label:
            return label
    caption = block.find("figcaption")
    if caption:
        label = clean_label(caption.get_text(" ", strip=True))
        if label:
            return label
    named = block.find(class_=LABEL_CLASSES)
    if named:
        label = clean_label(named.get_text(" ", strip=True))
        if label:
            return label
    heading = block.find(HEADING_TAGS)
    if heading:
        return clean_label(heading.get_text(" ", strip=True))
    return None


def _count_videos(block: Tag, base_url: str) -> int:
    urls = set()
    for tag, raw in _video_sources(block):
        video = canonical_video_url(base_url, raw)
        if video:
            urls.add(video)
    return len(urls)


def _associated_label(tag: Tag, base_url: str) -> str | None:
    label = _own_label(tag)
    if label:
        return label

    node = tag.parent
    for _ in range(MAX_BLOCK_ASCENT):
        if node is None or node.name in STOP_TAGS:
            break
        if node.name in BLOCK_TAGS:
            if _count_videos(node, base_url) > 1:
                # block shared by several videos: label is ambiguous
                break
            label = _block_label(node)
            if label:
                return label
        node = node.parent
    return None


def _page_label(soup: BeautifulSoup) -> str | None:
    og = soup.find("meta", attrs={"property": "og:title"})
    if og:
        label = clean_label(_attr(og, "content"))
        if label:
            return label
    if soup.title and soup.title.string:
        label = clean_label(soup.title.string)
        if label:
            return label
    h1 = soup.find("h1")
    if h1:
        return clean_label(h1.get_text(" ", strip=True))
    return None


def extract_media(soup: BeautifulSoup, source_url: str) -> list[MediaCandidate]:
    """Pair each recognised video on the page with its co-located label."""
    sources = []
    for tag, raw in _video_sources(soup):
        video = canonical_video_url(source_url, raw)
        if video:
            sources.append((tag, video))

    distinct_videos = {video for _, video in sources}
    page_label = _page_label(soup) if len(distinct_videos) == 1 else None

    candidates: list[MediaCandidate] = []
    seen: set[tuple[str, str]] = set()
    for tag, video in sources:
        name = _associated_label(tag, source_url) or page_label
        if not name:
            logger.debug(f"No label for {video} on {source_url}")
            continue
        key = (name, video)
        if key in seen:
            continue
        seen.add(key)
        candidates.append(
            MediaCandidate(name=name, video_url=video, source_url=source_url)
        )
    return candidates


def extract_links(
    base_url: str,
    html: str | BeautifulSoup,
    limit: int = 100,
    host: str | None = None,
) -> list[str]:
    """
    Extract absolute links from HTML.

    Args:
        base_url: Base URL for resolving relative links
        html: Raw HTML string or an already parsed document
        limit: Maximum number of links to extract
        host: When set, only links on this host are kept (and counted)

    Returns:
        List of unique normalized absolute URLs, in document order
    """
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
    urls: list[str] = []
    seen: set[str] = set()
    for a in soup.find_all("a"):
        if len(urls) >= limit:
            break
        u = normalize_url(base_url, _attr(a, "href"))
        if not u or u in seen:
            continue
        if host is not None and get_host(u) != host:
            continue
        seen.add(u)
        urls.append(u)
    return urls


def extract(
    content: str,
    source_url: str,
    link_limit: int = 100,
    link_host: str | None = None,
) -> PageExtraction:
    """
    Parse page content into media candidates and outbound links.

    link_host restricts links to one host before link_limit is applied.
    Never raises: content that cannot be parsed yields an empty result.
    """
    if not content or not content.strip():
        return PageExtraction()
    try:
        soup = BeautifulSoup(_strip_nul(content), "html.parser")
        return PageExtraction(
            candidates=extract_media(soup, source_url),
            links=extract_links(source_url, soup, limit=link_limit, host=link_host),
        )
    except Exception as e:
        logger.debug(f"Parse miss for {source_url}: {e}")
        return PageExtraction()
