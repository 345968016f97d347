"""Business logic service for URL shortener."""

import logging
from typing import Optional

from .hasher import Hasher, MD5Hasher
from .storage.base import Backend
from .common.validators import is_valid_url
from .common.logging_config import get_logger


class URLShortenerService:
    """Binds a hasher to a storage backend.

    Holds no per-request state, so one instance serves every request.
    """

    def __init__(
        self,
        backend: Backend,
        hasher: Optional[Hasher] = None,
        logger: Optional[logging.Logger] = None,
        validate_urls: bool = False,
    ):
        """Initialize URL shortener service.

        Args:
            backend: Storage backend instance
            hasher: Optional hasher (MD5 if not specified)
            logger: Optional logger
            validate_urls: Whether to reject URLs that are not http(s)
        """
        self.backend = backend
        self.hasher = hasher or MD5Hasher()
        self.logger = logger or get_logger("service")
        self.validate_urls = validate_urls

    async def shorten(self, url: str) -> str:
        """Store url under its derived key.

        A key already holding another URL is overwritten.

        Args:
            url: The original long URL

        Returns:
            The key the URL is stored under

        Raises:
            ValueError: If URL validation is enabled and url is invalid
            StorageError: If the mapping could not be persisted
        """
        if self.validate_urls:
            is_valid, error = is_valid_url(url)
            if not is_valid:
                raise ValueError(f"Invalid URL: {error}")

        key = self.hasher.hash(url)
        await self.backend.put(key, url)

        self.logger.info(f"Created mapping: {key} -> {url}")
        return key

    async def resolve(self, key: str) -> str:
        """Get the URL stored under key.

        Raises:
            KeyNotFoundError: If key is unknown
            StorageError: If the lookup failed
        """
        url = await self.backend.get(key)
        self.logger.debug(f"Resolved: {key} -> {url}")
        return url

    async def close(self) -> None:
        """Close the storage backend."""
        await self.backend.close()
