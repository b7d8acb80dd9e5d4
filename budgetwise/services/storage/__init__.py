"""
Storage Services Package

Provides the abstract backend interface, concrete backends, the
namespaced key-value store and the background write queue.
"""

from budgetwise.services.storage.interface import (
    BackendUnavailableError,
    InvalidKeyError,
    StorageBackend,
    StorageError,
)
from budgetwise.services.storage.codec import CodecError, decode_value, encode_value
from budgetwise.services.storage.backends import FileBackend, InMemoryBackend
from budgetwise.services.storage.kv_store import (
    BACKUP_METADATA_KEYS,
    REQUIRED_BACKUP_KEYS,
    KeyValueStore,
)
from budgetwise.services.storage.writer import WriteQueue

__all__ = [
    # Interfaces
    "StorageBackend",
    # Exceptions
    "BackendUnavailableError",
    "CodecError",
    "InvalidKeyError",
    "StorageError",
    # Codec
    "decode_value",
    "encode_value",
    # Backends
    "FileBackend",
    "InMemoryBackend",
    # Store
    "BACKUP_METADATA_KEYS",
    "REQUIRED_BACKUP_KEYS",
    "KeyValueStore",
    "WriteQueue",
]
