"""Storage layer for URL shortener."""

import logging
from typing import Optional

from .base import Backend
from .exceptions import BackendError, KeyNotFoundError, StorageError
from .memory import MemoryBackend
from .sqlite import SQLiteBackend

__all__ = [
    "Backend",
    "BackendError",
    "KeyNotFoundError",
    "StorageError",
    "MemoryBackend",
    "SQLiteBackend",
    "open_backend",
]


def open_backend(
    kind: str = "sqlite",
    path: str = "./",
    logger: Optional[logging.Logger] = None,
) -> Backend:
    """Open the storage backend named kind.

    Args:
        kind: Backend name ("sqlite" or "memory")
        path: Directory holding the database, for durable backends
        logger: Optional logger instance

    Returns:
        Backend instance

    Raises:
        ValueError: If kind is unknown
        StorageError: If the backend cannot be opened
    """
    kind = kind.lower()
    if kind == "sqlite":
        return SQLiteBackend(path, logger=logger)
    if kind == "memory":
        return MemoryBackend()
    raise ValueError(f"Unknown storage backend: {kind}")
