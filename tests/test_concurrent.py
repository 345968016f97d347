"""Tests that many simultaneous requests are served correctly.

Backends are shared by every request without external locking, so these
tests hit the API with concurrent writes and reads and check that none of
them is lost.
"""

import asyncio

import httpx
import pytest

from yaus.hasher import MD5Hasher
from web_app import create_app


@pytest.fixture
async def sqlite_client(sqlite_backend, logger):
    """Client for an app backed by SQLite."""
    app = create_app(backend=sqlite_backend, logger=logger)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_shorten_requests(self, sqlite_client):
        """Many concurrent POST /shorten with different URLs all succeed."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        tasks = [sqlite_client.post("/shorten", json={"url": url}) for url in urls]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        hasher = MD5Hasher()
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code} body={r.text}"
            assert r.json()["hash"] == hasher.hash(urls[i])

    async def test_concurrent_redirects_after_writes(self, sqlite_client):
        """Every concurrently written mapping is readable afterwards."""
        concurrency = 30
        urls = [f"https://example.com/target_{i}" for i in range(concurrency)]

        created = await asyncio.gather(
            *(sqlite_client.post("/shorten", json={"url": url}) for url in urls)
        )
        keys = [r.json()["hash"] for r in created]

        responses = await asyncio.gather(
            *(sqlite_client.get(f"/{key}", follow_redirects=False) for key in keys),
            return_exceptions=True,
        )

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 307, f"Request {i}: status {r.status_code}"
            assert r.headers["location"] == urls[i]

    async def test_concurrent_mixed_reads_and_writes(self, sqlite_client):
        """Reads of one key interleaved with writes of others."""
        create_resp = await sqlite_client.post(
            "/shorten",
            json={"url": "https://example.com/concurrent-target"},
        )
        key = create_resp.json()["hash"]

        tasks = (
            [sqlite_client.get(f"/{key}", follow_redirects=False) for _ in range(25)]
            + [
                sqlite_client.post("/shorten", json={"url": f"https://example.com/other_{i}"})
                for i in range(25)
            ]
        )
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            if r.request.method == "GET":
                assert r.status_code == 307
                assert r.headers["location"] == "https://example.com/concurrent-target"
            else:
                assert r.status_code == 200
