"""
Shared plumbing for the state stores.

A store owns one or more collections in memory. Every mutation runs to
completion synchronously, then schedules a whole-value write through
the WriteQueue. Reads always reflect memory, never storage.
"""

from typing import Any, Iterable, Optional, TypeVar

from pydantic import ValidationError

from budgetwise.audit import AuditLogger, get_logger
from budgetwise.models.base import RecordModel
from budgetwise.services.storage import WriteQueue

R = TypeVar("R", bound=RecordModel)


class PersistentSlice:
    """Base for stores whose state is persisted through a WriteQueue."""

    def __init__(
        self,
        writer: Optional[WriteQueue] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._writer = writer
        self._audit = audit_logger or AuditLogger()
        self._logger = get_logger(f"budgetwise.state.{type(self).__name__}")

    def _persist(self, key: str, value: Any) -> None:
        """Schedule a background write. No-op when the store is unbacked."""
        if self._writer is not None:
            self._writer.schedule(key, value)

    def _validate_records(
        self,
        model: type[R],
        raw: Any,
        key: str,
    ) -> Optional[list[R]]:
        """
        Turn a decoded stored collection into records.

        Records that fail validation are skipped and logged.

        Returns:
            The valid records, or None if `raw` is not a list
        """
        if not isinstance(raw, list):
            if raw is not None:
                self._logger.warning("stored_collection_malformed", key=key)
            return None

        records = []
        for index, item in enumerate(raw):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                self._logger.warning(
                    "stored_record_skipped",
                    key=key,
                    index=index,
                    error_count=e.error_count(),
                )
        return records


def dump_all(records: Iterable[RecordModel]) -> list[dict[str, Any]]:
    """Storage snapshot of a collection."""
    return [record.to_storage() for record in records]
