"""
Frontier & Visited Set

Per-job breadth-first work queue. A URL is marked visited the moment it
is admitted, so it can be admitted (and fetched) at most once per job.
"""

from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional

from media_ingest.utils.urls import normalize_url


class FrontierEmpty(Exception):
    """Raised by Frontier.dequeue() when no entries remain."""


@dataclass(frozen=True)
class FrontierEntry:
    url: str
    depth: int
    parent: Optional[str] = None


class VisitedSet:
    """Membership tracker over normalized URLs for a single job."""

    def __init__(self):
        self._urls: set[str] = set()

    def add(self, url: str) -> bool:
        """Add url; returns False if it was already present."""
        if url in self._urls:
            return False
        self._urls.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)


class Frontier:
    """
    FIFO queue of (url, depth) entries bounded by max_depth.

    enqueue() appends and dequeue() pops from the front, so emission order
    is breadth-first.
    """

    def __init__(self, max_depth: int, visited: VisitedSet | None = None):
        self.max_depth = max_depth
        self.visited = visited if visited is not None else VisitedSet()
        self._queue: deque[FrontierEntry] = deque()
        self.rejected_depth = 0
        self.rejected_duplicate = 0

    def enqueue(self, url: str, depth: int, parent: str | None = None) -> bool:
        """Admit url at depth unless too deep, invalid or already visited."""
        if depth > self.max_depth:
            self.rejected_depth += 1
            return False

        normalized = normalize_url(parent or url, url)
        if normalized is None:
            return False

        if not self.visited.add(normalized):
            self.rejected_duplicate += 1
            return False

        self._queue.append(FrontierEntry(url=normalized, depth=depth, parent=parent))
        return True

    def dequeue(self) -> FrontierEntry:
        if not self._queue:
            raise FrontierEmpty()
        return self._queue.popleft()

    def __len__(self) -> int:
        return len(self._queue)

    def is_empty(self) -> bool:
        return not self._queue
