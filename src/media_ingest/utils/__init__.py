"""
Utilities package initialization
"""

from media_ingest.utils.urls import normalize_url, is_http_url
from media_ingest.utils.parser import extract_media, extract_links

__all__ = ["normalize_url", "is_http_url", "extract_media", "extract_links"]
