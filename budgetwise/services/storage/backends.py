"""
Key-Value Backend Implementations

InMemoryBackend - a dict, for tests and ephemeral sessions.
FileBackend     - one file per key inside a data directory.

DESIGN DECISION: The file backend writes each value to a temporary file
and renames it into place, so a crash mid-write leaves the previous
value intact. Transient OS errors are retried a few times (tenacity
backs off with asyncio.sleep, so the event loop keeps running) before
the failure is reported as BackendUnavailableError.

TRADEOFFS:
- File I/O is synchronous inside the async methods (values are small)
- No locking: a single writer process is assumed
"""

import os
import re
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budgetwise.services.storage.interface import (
    BackendUnavailableError,
    InvalidKeyError,
    StorageBackend,
)


class InMemoryBackend(StorageBackend):
    """Dict-backed backend. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    async def get_all_keys(self) -> list[str]:
        return list(self._data)

    def raw(self) -> dict[str, str]:
        """Copy of the underlying data (for inspection in tests)."""
        return dict(self._data)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

_retry_os_errors = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, max=1),
    retry=retry_if_exception_type(OSError),
    reraise=True,
)


class FileBackend(StorageBackend):
    """
    File-per-key backend.

    Keys map to `<data_dir>/<key>.kv`. Keys are restricted to a safe
    character set so they can never escape the data directory.
    """

    SUFFIX = ".kv"

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir).expanduser()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise InvalidKeyError(f"Unsupported storage key: {key!r}")
        return self._data_dir / f"{key}{self.SUFFIX}"

    @_retry_os_errors
    async def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @_retry_os_errors
    async def _write(self, path: Path, value: str) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)

    @_retry_os_errors
    async def _unlink(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    async def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return await self._read(path)
        except OSError as e:
            raise BackendUnavailableError(f"Failed to read {key}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            await self._write(path, value)
        except OSError as e:
            raise BackendUnavailableError(f"Failed to write {key}: {e}") from e

    async def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            await self._unlink(path)
        except OSError as e:
            raise BackendUnavailableError(f"Failed to remove {key}: {e}") from e

    async def get_all_keys(self) -> list[str]:
        if not self._data_dir.exists():
            return []
        try:
            return sorted(
                path.name[:-len(self.SUFFIX)]
                for path in self._data_dir.iterdir()
                if path.is_file() and path.name.endswith(self.SUFFIX)
            )
        except OSError as e:
            raise BackendUnavailableError(f"Failed to list keys: {e}") from e
