"""Abstract base class for key-value storage backends."""

from abc import ABC, abstractmethod


class Backend(ABC):
    """Durable key-value store holding short key -> URL mappings.

    Implementations must be safe to call concurrently without external
    locking. Once put() returns, a get() for the same key started
    afterwards observes the new value.
    """

    @abstractmethod
    async def get(self, key: str) -> str:
        """Get the value stored under key.

        Args:
            key: The key to lookup

        Returns:
            The stored value, unchanged

        Raises:
            KeyNotFoundError: If nothing is stored under key
            StorageError: If the underlying store fails
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        The write is durable once this returns.

        Args:
            key: The key to write
            value: The value to store

        Raises:
            StorageError: If the underlying store fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying resources.

        Called once during shutdown. Operations after close are undefined.
        """
        pass
