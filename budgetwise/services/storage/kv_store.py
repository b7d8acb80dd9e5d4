"""
Namespaced Key-Value Store

Wraps a StorageBackend with:
- a fixed key prefix, so unrelated data in the same backend is untouched
- the value codec (JSON + base64, NOT encryption)
- backup export/import and an integrity scan

ERROR POLICY: nothing here raises into the caller. Missing keys and
undecodable values load as None; failed writes return False. Every
failure is logged.
"""

import asyncio
import json
from typing import Any, Optional

from budgetwise.audit import get_logger
from budgetwise.models.base import utc_now
from budgetwise.models.integrity import IntegrityIssue, IntegrityReport
from budgetwise.services.storage.codec import CodecError, decode_value, encode_value
from budgetwise.services.storage.interface import StorageBackend
from budgetwise.validation import check_core_data


# Keys every backup must contain at least one of
REQUIRED_BACKUP_KEYS = ("transactions", "budgets", "profile")

# Keys added to backup documents that are not storage keys
BACKUP_METADATA_KEYS = ("backupDate", "version")


class KeyValueStore:
    """
    Persistent key-value store for application data.

    Keys passed in are unprefixed ("transactions"); the prefix is
    applied on every backend call.
    """

    def __init__(
        self,
        backend: StorageBackend,
        prefix: str = "budgetwise_",
        backup_version: str = "1.0.0",
    ):
        self._backend = backend
        self._prefix = prefix
        self._backup_version = backup_version
        self._logger = get_logger("budgetwise.storage")

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def prefix(self) -> str:
        return self._prefix

    def _full_key(self, key: str) -> str:
        return self._prefix + key

    async def _namespaced_keys(self) -> list[str]:
        keys = await self._backend.get_all_keys()
        return [key for key in keys if key.startswith(self._prefix)]

    async def save(self, key: str, value: Any) -> bool:
        """Encode and write a value. Returns False on any failure."""
        try:
            encoded = encode_value(value)
            await self._backend.set_item(self._full_key(key), encoded)
            return True
        except Exception as e:
            self._logger.error("storage_save_failed", key=key, error=str(e))
            return False

    async def load(self, key: str) -> Optional[Any]:
        """Read and decode a value. Absent or undecodable values load as None."""
        try:
            encoded = await self._backend.get_item(self._full_key(key))
        except Exception as e:
            self._logger.error("storage_load_failed", key=key, error=str(e))
            return None

        if encoded is None:
            return None

        try:
            return decode_value(encoded)
        except CodecError as e:
            self._logger.warning("storage_decode_failed", key=key, error=str(e))
            return None

    async def remove(self, key: str) -> bool:
        try:
            await self._backend.remove_item(self._full_key(key))
            return True
        except Exception as e:
            self._logger.error("storage_remove_failed", key=key, error=str(e))
            return False

    async def clear_all(self) -> bool:
        """Remove every namespaced key. Other keys in the backend survive."""
        try:
            keys = await self._namespaced_keys()
            await self._backend.multi_remove(keys)
            self._logger.info("storage_cleared", key_count=len(keys))
            return True
        except Exception as e:
            self._logger.error("storage_clear_failed", error=str(e))
            return False

    async def keys(self) -> list[str]:
        """Unprefixed keys currently stored."""
        try:
            return [key[len(self._prefix):] for key in await self._namespaced_keys()]
        except Exception as e:
            self._logger.error("storage_list_failed", error=str(e))
            return []

    # =========================================================================
    # BACKUP & RESTORE
    # =========================================================================

    async def create_backup(self) -> Optional[str]:
        """
        Export every namespaced key into one JSON document.

        Values that cannot be decoded are exported as null.

        Returns:
            The backup document, or None if the backend could not be read
        """
        try:
            keys = await self._namespaced_keys()
            pairs = await self._backend.multi_get(keys)
        except Exception as e:
            self._logger.error("backup_creation_failed", error=str(e))
            return None

        backup: dict[str, Any] = {}
        for full_key, encoded in pairs:
            if encoded is None:
                continue
            key = full_key[len(self._prefix):]
            try:
                backup[key] = decode_value(encoded)
            except CodecError as e:
                self._logger.warning("backup_value_undecodable", key=key, error=str(e))
                backup[key] = None

        backup["backupDate"] = utc_now().isoformat()
        backup["version"] = self._backup_version

        self._logger.info("backup_created", key_count=len(pairs))
        return json.dumps(backup, indent=2, ensure_ascii=False)

    async def restore_from_backup(self, snapshot: str) -> bool:
        """
        Import a backup document.

        The document is rejected (no writes at all) unless it is a JSON
        object containing at least one of REQUIRED_BACKUP_KEYS. Each
        remaining key is written independently and concurrently; a
        failed write does not undo the others.

        Returns:
            True if the document was accepted and every write succeeded
        """
        try:
            data = json.loads(snapshot)
        except (TypeError, ValueError) as e:
            self._logger.warning("backup_rejected", reason="malformed_json", error=str(e))
            return False

        if not isinstance(data, dict):
            self._logger.warning("backup_rejected", reason="not_an_object")
            return False

        if not any(data.get(key) is not None for key in REQUIRED_BACKUP_KEYS):
            self._logger.warning("backup_rejected", reason="missing_required_keys")
            return False

        entries = {
            key: value
            for key, value in data.items()
            if key not in BACKUP_METADATA_KEYS and value is not None
        }
        results = await asyncio.gather(
            *(self.save(key, value) for key, value in entries.items())
        )

        failed = [key for key, ok in zip(entries, results) if not ok]
        if failed:
            self._logger.error("backup_restore_partial", failed_keys=failed)
            return False

        self._logger.info(
            "backup_restored",
            key_count=len(entries),
            backup_date=data.get("backupDate"),
            version=data.get("version"),
        )
        return True

    # =========================================================================
    # INTEGRITY
    # =========================================================================

    async def verify_data_integrity(self) -> IntegrityReport:
        """Scan the stored core collections for malformed records."""
        try:
            transactions, budgets, profile = await asyncio.gather(
                self.load("transactions"),
                self.load("budgets"),
                self.load("profile"),
            )
            report = check_core_data(transactions, budgets, profile)
        except Exception as e:
            self._logger.error("integrity_check_failed", error=str(e))
            return IntegrityReport(issues=[IntegrityIssue(
                record_type="storage",
                message="Data integrity check failed",
            )])

        if not report.is_valid:
            self._logger.warning(
                "integrity_issues_found",
                issue_count=len(report.issues),
                issues=report.messages,
            )
        return report
