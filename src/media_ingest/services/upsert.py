"""
Upsert Coordinator

Persists a batch of media candidates through the media store: malformed
candidates are dropped and counted, duplicates collapse to the last-seen
candidate per name, and each remaining name is upserted independently.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from media_ingest.db.media_store import MediaStore
from media_ingest.domain.media import MediaCandidate, MediaRecord
from media_ingest.utils.urls import is_http_url

logger = logging.getLogger(__name__)

MAX_ERROR_DETAIL_LENGTH = 240


@dataclass(frozen=True)
class MediaError:
    name: str
    video_url: str
    error: str


@dataclass
class UpsertReport:
    saved: list[MediaRecord] = field(default_factory=list)
    errors: list[MediaError] = field(default_factory=list)
    malformed: int = 0
    duplicates: int = 0

    @property
    def saved_count(self) -> int:
        return len(self.saved)


def _clean(value) -> str:
    if not isinstance(value, str):
        return ""
    return " ".join(value.split())


def _is_well_formed(candidate: MediaCandidate) -> bool:
    return bool(_clean(candidate.name)) and is_http_url(candidate.video_url)


def dedupe_last_write_wins(
    candidates: Iterable[MediaCandidate],
) -> tuple[list[MediaCandidate], int]:
    """
    Keep the last-seen candidate for each name.

    Returns the unique candidates (in order of each name's first
    appearance) and the number of superseded ones.
    """
    by_name: dict[str, MediaCandidate] = {}
    total = 0
    for candidate in candidates:
        total += 1
        by_name[candidate.name] = candidate
    return list(by_name.values()), total - len(by_name)


class UpsertCoordinator:
    def __init__(self, store: MediaStore):
        self.store = store

    def persist(self, candidates: Iterable[MediaCandidate]) -> UpsertReport:
        report = UpsertReport()

        well_formed: list[MediaCandidate] = []
        for candidate in candidates:
            if not _is_well_formed(candidate):
                report.malformed += 1
                logger.debug(f"Dropping malformed candidate: {candidate!r}")
                continue
            well_formed.append(
                MediaCandidate(
                    name=_clean(candidate.name),
                    video_url=candidate.video_url.strip(),
                    source_url=candidate.source_url,
                )
            )

        unique, report.duplicates = dedupe_last_write_wins(well_formed)

        for candidate in unique:
            try:
                record = self.store.upsert(candidate.name, candidate.video_url)
                report.saved.append(record)
            except Exception as e:
                detail = " ".join(str(e).split())[:MAX_ERROR_DETAIL_LENGTH]
                logger.warning(f"Failed to save media '{candidate.name}': {detail}")
                report.errors.append(
                    MediaError(
                        name=candidate.name,
                        video_url=candidate.video_url,
                        error=detail or type(e).__name__,
                    )
                )

        logger.info(
            f"Upserted {report.saved_count}/{len(unique)} media "
            f"(errors={len(report.errors)}, malformed={report.malformed}, "
            f"duplicates={report.duplicates})"
        )
        return report
