"""Exceptions raised by storage backends.

Classes:
    BackendError:
        Generic base class for storage backend exceptions.

    KeyNotFoundError:
        Raised when a key has no mapping in the store.

    StorageError:
        Raised when the underlying store fails (I/O, corruption, closed handle).
"""


class BackendError(Exception):
    """Generic base class for storage backend exceptions."""

    pass


class KeyNotFoundError(BackendError):
    """Exception raised when a key is absent from the store."""

    def __init__(self, key: str):
        super().__init__(f"Key not found: {key}")
        self.key = key


class StorageError(BackendError):
    """Exception raised when the underlying store fails.

    e.g. disk errors, database corruption, locked database.
    """

    pass
