"""Key derivation for shortened URLs."""

import hashlib
import string
from abc import ABC, abstractmethod


class Hasher(ABC):
    """Maps arbitrary text to a short deterministic key."""

    @abstractmethod
    def hash(self, text: str) -> str:
        """Return the key derived from text.

        Must be deterministic and side-effect free. Any string, including
        the empty one, produces a key.
        """
        pass


class MD5Hasher(Hasher):
    """Hasher producing the hex MD5 digest of the text."""

    def hash(self, text: str) -> str:
        return hashlib.md5(text.encode("utf-8", "surrogatepass")).hexdigest()


class Base62Hasher(Hasher):
    """Hasher producing a truncated base62 rendering of a SHA-256 digest.

    Keys are shorter than MD5 hex keys, so distinct URLs are more likely
    to share a key. Last write wins on collision.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits

    def __init__(self, length: int = 6):
        """Initialize base62 hasher.

        Args:
            length: Number of characters kept from the encoded digest
        """
        if length < 1:
            raise ValueError("Key length must be positive")
        self.length = length

    def hash(self, text: str) -> str:
        digest = hashlib.sha256(text.encode("utf-8", "surrogatepass")).digest()
        code = self._int_to_base62(int.from_bytes(digest, "big"))
        return code[:self.length]

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string.

        Args:
            num: Integer to convert

        Returns:
            Base62 string
        """
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            num, remainder = divmod(num, base)
            result.append(self.BASE62_CHARS[remainder])

        return ''.join(reversed(result))


def create_hasher(name: str = "md5", length: int = 6) -> Hasher:
    """Build the hasher registered under name.

    Args:
        name: Hasher name ("md5" or "base62")
        length: Key length, used by the base62 hasher only

    Returns:
        Hasher instance

    Raises:
        ValueError: If name is unknown
    """
    name = name.lower()
    if name == "md5":
        return MD5Hasher()
    if name == "base62":
        return Base62Hasher(length=length)
    raise ValueError(f"Unknown hasher: {name}")
