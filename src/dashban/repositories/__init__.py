"""Repository layer for persisted board state."""

from .protocol import StorageError, StorageProtocol
from .storage import FileStorage, MemoryStorage

__all__ = [
    "FileStorage",
    "MemoryStorage",
    "StorageError",
    "StorageProtocol",
]
