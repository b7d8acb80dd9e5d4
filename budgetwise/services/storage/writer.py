"""
Fire-and-forget persistence.

Store mutations are synchronous. After mutating, a store hands the new
value to the WriteQueue, which writes it in the background. Callers
never wait for durability; flush() exists for tests and shutdown.

If no event loop is running when a write is scheduled, the write is
held until the next schedule() inside a loop or until flush(). Queued
writes always start in the order they were scheduled, so the last
value scheduled for a key is the one that ends up stored.
"""

import asyncio
from typing import Any, Optional

from budgetwise.audit import AuditLogger
from budgetwise.models.audit import AuditEventType, AuditSeverity
from budgetwise.services.storage.kv_store import KeyValueStore


class WriteQueue:
    """Schedules whole-value writes against a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._pending: set[asyncio.Task] = set()
        self._deferred: list[tuple[str, Any]] = []

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def pending_count(self) -> int:
        """Writes scheduled but not yet finished."""
        return len(self._pending) + len(self._deferred)

    def schedule(self, key: str, value: Any) -> None:
        """
        Queue a write of `value` under `key`.

        `value` must already be a JSON-safe snapshot; it is not copied.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deferred.append((key, value))
            return

        if self._deferred:
            deferred, self._deferred = self._deferred, []
            for deferred_key, deferred_value in deferred:
                self._start(loop, deferred_key, deferred_value)
        self._start(loop, key, value)

    def _start(self, loop: asyncio.AbstractEventLoop, key: str, value: Any) -> None:
        task = loop.create_task(self._write(key, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, value: Any) -> bool:
        ok = await self._store.save(key, value)
        if not ok:
            self._audit.record(
                AuditEventType.STORAGE_WRITE_FAILED,
                f"Background write of '{key}' failed; in-memory state is ahead of storage",
                entity_type="storage",
                entity_id=key,
                severity=AuditSeverity.WARNING,
            )
        return ok

    async def flush(self) -> bool:
        """
        Wait for every queued write.

        Returns:
            True if all writes finished since the last flush succeeded
        """
        results = []

        deferred, self._deferred = self._deferred, []
        for key, value in deferred:
            results.append(await self._write(key, value))

        while self._pending:
            tasks = list(self._pending)
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
            self._pending.difference_update(tasks)
            results.extend(outcome is True for outcome in outcomes)

        return all(results)
