"""Core of the YAUS URL shortener: hashing, storage and the service binding them."""

from .hasher import Hasher, MD5Hasher, Base62Hasher, create_hasher
from .service import URLShortenerService

__version__ = "1.0.0"

__all__ = [
    "Hasher",
    "MD5Hasher",
    "Base62Hasher",
    "create_hasher",
    "URLShortenerService",
]
