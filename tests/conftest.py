"""
Test configuration and fixtures for the ingestion service tests
"""

import os
import sys
from pathlib import Path

# Set ENVIRONMENT before importing any modules that use the settings
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_IMPORT_TOKEN"] = "test-admin-token"
os.environ.pop("DATABASE_URL", None)

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest  # noqa: E402
from unittest.mock import patch  # noqa: E402

ADMIN_TOKEN = "test-admin-token"


class FakeStream:
    """aiohttp StreamReader double delivering the body in small pieces"""

    def __init__(self, body: bytes, piece_size: int = 16):
        self._body = body
        self._piece_size = piece_size

    async def iter_chunked(self, n):
        step = min(n, self._piece_size)
        for start in range(0, len(self._body), step):
            yield self._body[start : start + step]


class FakeResponse:
    """Minimal stand-in for an aiohttp response context manager"""

    def __init__(self, status=200, body="", content_type="text/html", error=None):
        self.status = status
        self.headers = {"Content-Type": content_type}
        self.content = FakeStream(body.encode("utf-8"))
        self._error = error

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """
    aiohttp.ClientSession double serving canned pages.

    pages: url -> html (200) or (status, html)
    errors: url -> exception raised when the request is entered
    """

    def __init__(self, pages=None, errors=None, clock=None):
        self.pages = pages or {}
        self.errors = errors or {}
        self.clock = clock
        self.requested: list[str] = []
        self.started_at: list[float] = []

    def get(self, url, **kwargs):
        self.requested.append(url)
        if self.clock is not None:
            self.started_at.append(self.clock())
        if url in self.errors:
            return FakeResponse(error=self.errors[url])
        page = self.pages.get(url)
        if page is None:
            return FakeResponse(status=404, body="not found")
        if isinstance(page, tuple):
            status, body = page
            return FakeResponse(status=status, body=body)
        return FakeResponse(body=page)


class FakeClock:
    """Monotonic clock advanced only by sleep()"""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing"""
    return str(tmp_path / "test_media.db")


@pytest.fixture
def media_store(temp_db_path):
    """Create a test SqlMediaStore instance"""
    from media_ingest.db.media_store import SqlMediaStore

    return SqlMediaStore(temp_db_path)


@pytest.fixture
def test_client(temp_db_path):
    """FastAPI test client with temporary database"""
    from fastapi.testclient import TestClient
    from media_ingest.api import deps
    from media_ingest.main import app

    deps.reset_media_store()
    with patch("media_ingest.core.config.settings.MEDIA_DB_PATH", temp_db_path):
        with TestClient(app) as client:
            yield client
    app.dependency_overrides.clear()
    deps.reset_media_store()
