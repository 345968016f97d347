"""Pytest configuration and fixtures."""

import asyncio
import os

import httpx
import pytest

from yaus.hasher import Hasher, MD5Hasher
from yaus.storage import MemoryBackend, SQLiteBackend, StorageError
from yaus.common.logging_config import setup_logging
from web_app import create_app


class MockHasher(Hasher):
    """Hasher with a fixed key for the example URL."""

    def hash(self, text: str) -> str:
        if text == "http://www.example.com":
            return "test-hash"
        return MD5Hasher().hash(text)


class FailingBackend(MemoryBackend):
    """Backend whose every operation fails."""

    async def get(self, key: str) -> str:
        raise StorageError("disk on fire")

    async def put(self, key: str, value: str) -> None:
        raise StorageError("disk on fire")


class SlowBackend(MemoryBackend):
    """Backend whose writes take delay seconds."""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay
        self.started = asyncio.Event()
        self.completed = False

    async def put(self, key: str, value: str) -> None:
        self.started.set()
        await asyncio.sleep(self.delay)
        await super().put(key, value)
        self.completed = True


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the development config file and YAUS_* variables out of tests."""
    monkeypatch.setenv("YAUS_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    for name in list(os.environ):
        if name.startswith("YAUS_") and name != "YAUS_CONFIG_FILE":
            monkeypatch.delenv(name)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def mock_hasher():
    return MockHasher()


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
async def sqlite_backend(tmp_path, logger):
    """Create SQLite backend in a temporary directory."""
    backend = SQLiteBackend(str(tmp_path / "store"), logger=logger)

    yield backend

    await backend.close()


@pytest.fixture(params=["memory", "sqlite"])
async def backend(request, tmp_path, logger):
    """Every backend implementation."""
    if request.param == "memory":
        backend = MemoryBackend()
    else:
        backend = SQLiteBackend(str(tmp_path / "store"), logger=logger)

    yield backend

    await backend.close()


@pytest.fixture
def app(memory_backend, mock_hasher, logger):
    """Create test FastAPI app."""
    return create_app(backend=memory_backend, hasher=mock_hasher, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
