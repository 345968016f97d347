"""In-memory implementation of the storage backend."""

import threading
from typing import Dict

from .base import Backend
from .exceptions import KeyNotFoundError


class MemoryBackend(Backend):
    """Dictionary-backed store.

    Mappings live only as long as the process, so this backend is meant for
    tests and throwaway instances.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> str:
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise KeyNotFoundError(key) from None

    async def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    async def close(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
