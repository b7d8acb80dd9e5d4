"""
Application State

DESIGN DECISION: There is no module-level store. An AppState is
constructed at startup and passed to whatever needs it; tests build
their own with an in-memory backend.

    state = create_app_state()
    await state.load()
    state.transactions.add({...})
    ...
    await state.close()
"""

import asyncio
from typing import Optional

from budgetwise.audit import AuditLogger, configure_logging
from budgetwise.config import AppSettings, get_settings
from budgetwise.models.audit import AuditEventType, AuditSeverity
from budgetwise.models.integrity import IntegrityReport
from budgetwise.models.user_settings import SettingsGroup
from budgetwise.services.storage import (
    FileBackend,
    InMemoryBackend,
    KeyValueStore,
    StorageBackend,
    WriteQueue,
)
from budgetwise.state import analytics as analytics_keys
from budgetwise.state import budgets as budget_keys
from budgetwise.state import transactions as transaction_keys
from budgetwise.state.analytics import AnalyticsAggregator
from budgetwise.state.budgets import BudgetRegistry
from budgetwise.state.settings import SettingsStore
from budgetwise.state.transactions import TransactionLedger


class AppState:
    """
    Owns the four stores and the write queue that persists them.

    In-memory state is authoritative for the session; storage catches up
    in the background. Use flush() before reading storage directly.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[AppSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._writer = WriteQueue(store, self._audit)

        self.transactions = TransactionLedger(
            self._writer,
            self._audit,
            recent_limit=self._settings.recent_transactions_limit,
        )
        self.budgets = BudgetRegistry(
            self._writer,
            self._audit,
            default_alert_threshold=self._settings.default_alert_threshold,
        )
        self.settings = SettingsStore(self._writer, self._audit)
        self.analytics = AnalyticsAggregator(
            self._writer,
            self._audit,
            retention=self._settings.report_retention,
        )

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def writer(self) -> WriteQueue:
        return self._writer

    async def load(self) -> None:
        """
        Hydrate every store from storage.

        Absent keys leave the store at its defaults; undecodable values
        and invalid records are skipped (and logged) by the stores.
        """
        await self._writer.flush()

        settings_groups = list(SettingsGroup)
        keys = [
            transaction_keys.STORAGE_KEY,
            budget_keys.STORAGE_KEY,
            analytics_keys.INSIGHTS_KEY,
            analytics_keys.PATTERNS_KEY,
            analytics_keys.PREDICTIONS_KEY,
            analytics_keys.REPORTS_KEY,
        ] + [group.value for group in settings_groups]

        values = dict(zip(keys, await asyncio.gather(*(self._store.load(k) for k in keys))))

        self.transactions.hydrate(values[transaction_keys.STORAGE_KEY])
        self.budgets.hydrate(values[budget_keys.STORAGE_KEY])
        for group in settings_groups:
            self.settings.hydrate(group, values[group.value])
        self.analytics.hydrate(
            insights=values[analytics_keys.INSIGHTS_KEY],
            patterns=values[analytics_keys.PATTERNS_KEY],
            predictions=values[analytics_keys.PREDICTIONS_KEY],
            reports=values[analytics_keys.REPORTS_KEY],
        )

    async def flush(self) -> bool:
        """Wait for every pending background write."""
        return await self._writer.flush()

    async def close(self) -> None:
        await self.flush()

    # =========================================================================
    # BACKUP, RESTORE, INTEGRITY
    # =========================================================================

    async def create_backup(self) -> Optional[str]:
        """Flush pending writes, then export storage as one JSON document."""
        await self.flush()
        backup = await self._store.create_backup()
        if backup is not None:
            self._audit.record(
                AuditEventType.BACKUP_CREATED,
                "Backup created",
                entity_type="storage",
            )
        return backup

    async def restore_backup(self, snapshot: str) -> bool:
        """
        Restore a backup document into storage and reload every store.

        Restore is best-effort: keys written before a failure stay written,
        and the stores are reloaded either way.
        """
        await self.flush()
        ok = await self._store.restore_from_backup(snapshot)

        if ok:
            self._audit.record(
                AuditEventType.BACKUP_RESTORED,
                "Backup restored",
                entity_type="storage",
            )
        else:
            self._audit.record(
                AuditEventType.BACKUP_REJECTED,
                "Backup was rejected or only partially restored",
                entity_type="storage",
                severity=AuditSeverity.WARNING,
            )

        await self.load()
        return ok

    async def verify_integrity(self) -> IntegrityReport:
        await self.flush()
        return await self._store.verify_data_integrity()

    async def wipe(self) -> bool:
        """Reset every store and remove all namespaced keys from storage."""
        self.transactions.clear()
        self.budgets.clear()
        self.analytics.clear_all()
        self.settings.reset_all()
        await self.flush()

        ok = await self._store.clear_all()
        self._audit.record(
            AuditEventType.STORAGE_CLEARED,
            "All application data wiped",
            entity_type="storage",
            severity=AuditSeverity.INFO if ok else AuditSeverity.ERROR,
        )
        return ok


def create_backend(settings: AppSettings) -> StorageBackend:
    """Build the configured key-value backend."""
    if settings.storage_backend == "memory":
        return InMemoryBackend()
    return FileBackend(settings.data_dir)


def create_app_state(
    settings: Optional[AppSettings] = None,
    backend: Optional[StorageBackend] = None,
) -> AppState:
    """
    Factory function to create the application state.

    Args:
        settings: Loaded settings (defaults to get_settings())
        backend: Override the configured backend (e.g. for tests)

    Returns:
        An AppState that has not been loaded yet; await load() next.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    store = KeyValueStore(
        backend or create_backend(settings),
        prefix=settings.storage_prefix,
        backup_version=settings.backup_version,
    )
    return AppState(store, settings=settings)
