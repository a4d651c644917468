"""
Fetcher Tests

Outcome classification and politeness pacing.
"""

import asyncio
import time

import aiohttp
from aiohttp import test_utils, web
import pytest

from conftest import FakeSession
from media_ingest.services.fetcher import Fetcher, FetchOutcome


@pytest.mark.asyncio
async def test_fetch_success():
    session = FakeSession({"http://example.com/": "<html>ok</html>"})
    fetcher = Fetcher(session, delay_ms=0)

    result = await fetcher.fetch("http://example.com/")

    assert result.ok is True
    assert result.outcome == FetchOutcome.SUCCESS
    assert result.status_code == 200
    assert result.content == "<html>ok</html>"
    assert fetcher.attempts == 1


@pytest.mark.asyncio
async def test_fetch_http_error_classified():
    session = FakeSession({"http://example.com/gone": (410, "gone")})
    fetcher = Fetcher(session, delay_ms=0)

    result = await fetcher.fetch("http://example.com/gone")

    assert result.ok is False
    assert result.outcome == FetchOutcome.HTTP_ERROR
    assert result.status_code == 410
    assert result.content == ""


@pytest.mark.asyncio
async def test_fetch_timeout_classified():
    session = FakeSession(errors={"http://slow.com/": asyncio.TimeoutError()})
    fetcher = Fetcher(session, delay_ms=0)

    result = await fetcher.fetch("http://slow.com/")

    assert result.outcome == FetchOutcome.TIMEOUT
    assert result.status_code is None


@pytest.mark.asyncio
async def test_fetch_network_error_classified():
    session = FakeSession(
        errors={"http://down.com/": aiohttp.ClientConnectionError("Connection refused")}
    )
    fetcher = Fetcher(session, delay_ms=0)

    result = await fetcher.fetch("http://down.com/")

    assert result.outcome == FetchOutcome.NETWORK_ERROR
    assert "Connection refused" in result.detail


@pytest.mark.asyncio
async def test_unexpected_error_does_not_raise():
    session = FakeSession(errors={"http://weird.com/": RuntimeError("boom")})
    fetcher = Fetcher(session, delay_ms=0)

    result = await fetcher.fetch("http://weird.com/")

    assert result.outcome == FetchOutcome.NETWORK_ERROR
    assert "boom" in result.detail


@pytest.mark.asyncio
async def test_first_fetch_not_delayed(fake_clock):
    session = FakeSession({"http://a.com/": "a"})
    fetcher = Fetcher(session, delay_ms=300, clock=fake_clock, sleep=fake_clock.sleep)

    await fetcher.fetch("http://a.com/")

    assert fake_clock.sleeps == []


@pytest.mark.asyncio
async def test_pacing_between_fetch_starts(fake_clock):
    session = FakeSession(
        {"http://a.com/1": "1", "http://a.com/2": "2", "http://b.com/3": "3"},
        clock=fake_clock,
    )
    fetcher = Fetcher(session, delay_ms=300, clock=fake_clock, sleep=fake_clock.sleep)

    for url in ("http://a.com/1", "http://a.com/2", "http://b.com/3"):
        await fetcher.fetch(url)

    starts = session.started_at
    # Global pacing: different hosts are spaced too
    assert all(b - a >= 0.3 - 1e-9 for a, b in zip(starts, starts[1:]))


@pytest.mark.asyncio
async def test_pacing_enforced_after_failures(fake_clock):
    session = FakeSession(
        errors={
            "http://x.com/1": aiohttp.ClientConnectionError("refused"),
            "http://x.com/2": aiohttp.ClientConnectionError("refused"),
        },
        clock=fake_clock,
    )
    fetcher = Fetcher(session, delay_ms=500, clock=fake_clock, sleep=fake_clock.sleep)

    await fetcher.fetch("http://x.com/1")
    await fetcher.fetch("http://x.com/2")

    assert session.started_at[1] - session.started_at[0] >= 0.5 - 1e-9


@pytest.mark.asyncio
async def test_elapsed_time_covers_delay_between_pages():
    session = FakeSession({f"http://a.com/{i}": "x" for i in range(3)})
    fetcher = Fetcher(session, delay_ms=50)

    started = time.monotonic()
    for i in range(3):
        await fetcher.fetch(f"http://a.com/{i}")
    elapsed = time.monotonic() - started

    # allow for event-loop clock resolution
    assert elapsed >= (3 - 1) * 0.05 - 0.001


HEAD_CHUNK = b"<html><body>" + b"<p>filler</p>" * 80
TAIL_CHUNK = b'<a href="/tail">tail</a></body></html>'


async def streamed_page(request):
    resp = web.StreamResponse(headers={"Content-Type": "text/html"})
    await resp.prepare(request)
    await resp.write(HEAD_CHUNK)
    await asyncio.sleep(0.2)
    await resp.write(TAIL_CHUNK)
    await resp.write_eof()
    return resp


@pytest.mark.asyncio
async def test_body_read_to_end_across_network_chunks():
    app = web.Application()
    app.router.add_get("/page", streamed_page)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as session:
            result = await Fetcher(session).fetch(str(server.make_url("/page")))
    finally:
        await server.close()

    assert result.outcome == FetchOutcome.SUCCESS
    assert len(result.content) == len(HEAD_CHUNK) + len(TAIL_CHUNK)
    assert '<a href="/tail">' in result.content


@pytest.mark.asyncio
async def test_body_truncated_at_max_response_bytes():
    body = "x" * 100
    session = FakeSession({"http://big.com/": body})
    fetcher = Fetcher(session, max_response_bytes=40)

    result = await fetcher.fetch("http://big.com/")

    assert result.ok is True
    assert result.content == "x" * 40


@pytest.mark.asyncio
async def test_body_at_exact_limit_not_truncated():
    session = FakeSession({"http://fit.com/": "y" * 32})
    fetcher = Fetcher(session, max_response_bytes=32)

    result = await fetcher.fetch("http://fit.com/")

    assert result.content == "y" * 32
