"""Services package."""

from budgetwise.services.storage import (
    BackendUnavailableError,
    CodecError,
    FileBackend,
    InMemoryBackend,
    InvalidKeyError,
    KeyValueStore,
    StorageBackend,
    StorageError,
    WriteQueue,
)

__all__ = [
    "BackendUnavailableError",
    "CodecError",
    "FileBackend",
    "InMemoryBackend",
    "InvalidKeyError",
    "KeyValueStore",
    "StorageBackend",
    "StorageError",
    "WriteQueue",
]
