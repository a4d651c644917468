"""
Media Database Layer

Provides the media store used to persist exercise media records.
"""

from media_ingest.db.media_store import MediaStore, SqlMediaStore

__all__ = ["MediaStore", "SqlMediaStore"]
