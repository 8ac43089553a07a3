"""Storage protocol for persisted board state."""

from typing import Protocol


class StorageError(Exception):
    """A storage backend could not write or remove a value."""


class StorageProtocol(Protocol):
    """String key/value storage, shaped like browser local storage.

    Implementations:
    - MemoryStorage (tests, ephemeral sessions)
    - FileStorage (one JSON file per key)

    Values are JSON text; parsing is left to the callers so that each
    store decides how to treat malformed data.
    """

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            StorageError: The value could not be written.
        """
        ...

    def remove_item(self, key: str) -> None:
        """Remove a value. Missing keys are ignored."""
        ...
