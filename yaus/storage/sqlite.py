"""SQLite implementation of the storage backend."""

import asyncio
import logging
import os
import sqlite3
import threading
from typing import Optional

from .base import Backend
from .exceptions import KeyNotFoundError, StorageError
from ..common.logging_config import get_logger


class SQLiteBackend(Backend):
    """Embedded SQLite store rooted at a directory.

    A single connection is shared by all requests and guarded by a lock.
    Blocking calls run in a worker thread so the event loop keeps serving.
    """

    DB_FILENAME = "yaus.sqlite3"

    SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS mappings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
    """

    UPSERT_SQL = """
    INSERT INTO mappings (key, value) VALUES (?, ?)
    ON CONFLICT(key) DO UPDATE SET value=excluded.value
    """

    SELECT_SQL = "SELECT value FROM mappings WHERE key = ?"

    def __init__(
        self,
        path: str,
        busy_timeout_seconds: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Open (or create, if not present) the database under path.

        Args:
            path: Directory holding the database file
            busy_timeout_seconds: How long a locked database is retried
            logger: Optional logger instance

        Raises:
            StorageError: If the database cannot be opened
        """
        self.logger = logger or get_logger("storage")
        self.path = path
        self.db_file = os.path.join(path, self.DB_FILENAME)
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None

        try:
            os.makedirs(os.path.abspath(path), exist_ok=True)
            self._conn = sqlite3.connect(
                self.db_file,
                timeout=busy_timeout_seconds,
                check_same_thread=False,
            )
            # Committed transactions are fsynced through the write-ahead log
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=FULL")
            self._conn.executescript(self.SCHEMA_SQL)
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            if self._conn is not None:
                self._conn.close()
            raise StorageError(f"Failed to open database at {self.db_file}: {e}") from e

        self.logger.info(f"Opened SQLite store at {self.db_file}")

    def _get(self, key: str) -> str:
        with self._lock:
            try:
                row = self._conn.execute(self.SELECT_SQL, (key,)).fetchone()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to read key {key!r}: {e}") from e

        if row is None:
            raise KeyNotFoundError(key)
        return row[0]

    def _put(self, key: str, value: str) -> None:
        with self._lock:
            try:
                with self._conn:
                    self._conn.execute(self.UPSERT_SQL, (key, value))
            except sqlite3.Error as e:
                raise StorageError(f"Failed to write key {key!r}: {e}") from e

    def _close(self) -> None:
        with self._lock:
            try:
                self._conn.close()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to close database: {e}") from e

    async def get(self, key: str) -> str:
        return await asyncio.to_thread(self._get, key)

    async def put(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._put, key, value)

    async def close(self) -> None:
        await asyncio.to_thread(self._close)
        self.logger.info("SQLite store closed")
