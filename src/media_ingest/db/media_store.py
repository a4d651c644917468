"""
Media Store

Persists exercise media keyed uniquely by name. upsert() is idempotent by
name and last-write-wins: a new name is created, an existing one has its
video URL and timestamp replaced.
"""

import logging
import threading
import time
from typing import Protocol

from media_ingest.db.connection import get_connection, is_postgres_mode, sql_placeholder
from media_ingest.domain.media import MediaRecord

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS exercise_media (
    name TEXT PRIMARY KEY,
    video_url TEXT NOT NULL,
    updated_at INTEGER NOT NULL
)
"""


class MediaStore(Protocol):
    def upsert(self, name: str, video_url: str) -> MediaRecord: ...

    def get(self, name: str) -> MediaRecord | None: ...

    def list_all(self) -> list[MediaRecord]: ...


class SqlMediaStore:
    """MediaStore backed by SQLite (dev/test) or PostgreSQL (DATABASE_URL)."""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path
        # serialize writers sharing one SQLite file within the process
        self._write_lock = threading.Lock()
        self._init_db()

    def _connect(self):
        return get_connection(self.db_path)

    def _init_db(self) -> None:
        con = self._connect()
        try:
            cur = con.cursor()
            if not is_postgres_mode():
                cur.execute("PRAGMA journal_mode=WAL")
            cur.execute(SCHEMA_SQL)
            con.commit()
            cur.close()
        finally:
            con.close()

    def upsert(self, name: str, video_url: str) -> MediaRecord:
        ph = sql_placeholder()
        now = int(time.time())
        with self._write_lock:
            con = self._connect()
            try:
                cur = con.cursor()
                cur.execute(
                    f"""
                    INSERT INTO exercise_media (name, video_url, updated_at)
                    VALUES ({ph}, {ph}, {ph})
                    ON CONFLICT (name) DO UPDATE SET
                        video_url = excluded.video_url,
                        updated_at = excluded.updated_at
                    """,
                    (name, video_url, now),
                )
                con.commit()
                cur.close()
            finally:
                con.close()
        return MediaRecord(name=name, video_url=video_url, updated_at=now)

    def get(self, name: str) -> MediaRecord | None:
        ph = sql_placeholder()
        con = self._connect()
        try:
            cur = con.cursor()
            cur.execute(
                f"SELECT name, video_url, updated_at FROM exercise_media WHERE name = {ph}",
                (name,),
            )
            row = cur.fetchone()
            cur.close()
        finally:
            con.close()
        if row is None:
            return None
        return MediaRecord(name=row[0], video_url=row[1], updated_at=row[2])

    def list_all(self) -> list[MediaRecord]:
        con = self._connect()
        try:
            cur = con.cursor()
            cur.execute(
                "SELECT name, video_url, updated_at FROM exercise_media ORDER BY name"
            )
            rows = cur.fetchall()
            cur.close()
        finally:
            con.close()
        return [MediaRecord(name=r[0], video_url=r[1], updated_at=r[2]) for r in rows]

    def count(self) -> int:
        con = self._connect()
        try:
            cur = con.cursor()
            cur.execute("SELECT COUNT(*) FROM exercise_media")
            total = cur.fetchone()[0]
            cur.close()
        finally:
            con.close()
        return total
