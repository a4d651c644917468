"""
Media Types

MediaCandidate is transient crawl output; MediaRecord mirrors a row owned
by the media store.
"""

from dataclasses import dataclass, asdict
from typing import Any, Optional


@dataclass(frozen=True)
class MediaCandidate:
    name: str
    video_url: str
    source_url: Optional[str] = None


@dataclass(frozen=True)
class MediaRecord:
    name: str
    video_url: str
    updated_at: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
