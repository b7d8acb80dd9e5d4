"""
Tests for the application state container: load, background
persistence, backup/restore and wipe.
"""

import json

import pytest

from budgetwise.services.storage import KeyValueStore
from budgetwise.state import AppState, create_app_state


class TestLoad:
    """Tests for hydrating every store from storage."""

    @pytest.mark.asyncio
    async def test_fresh_state_reloads_what_was_written(
        self, state, app_settings, backend, make_transaction, make_budget
    ):
        added = state.transactions.add(make_transaction())
        state.budgets.add(make_budget())
        state.settings.update_group("profile", {"name": "Ada"})
        state.analytics.add_insight({"type": "info", "title": "Tip", "description": "x"})
        await state.flush()

        reopened = create_app_state(app_settings, backend=backend)
        await reopened.load()

        assert reopened.transactions.get(added.id).description == "Grocery Store"
        assert reopened.budgets.budgets[0].category == "Food"
        assert reopened.settings.profile.name == "Ada"
        assert reopened.analytics.insights[0].title == "Tip"

    @pytest.mark.asyncio
    async def test_empty_storage_loads_defaults(self, state):
        await state.load()
        assert len(state.transactions) == 0
        assert state.settings.profile.name == "John Doe"
        assert state.analytics.recent_reports("weekly") == []

    @pytest.mark.asyncio
    async def test_corrupted_key_loads_as_default(self, state, backend):
        await backend.set_item("budgetwise_transactions", "%%%")
        await state.load()
        assert len(state.transactions) == 0


class TestBackgroundWrites:

    def test_writes_without_a_loop_are_deferred(self, state, make_transaction):
        state.transactions.add(make_transaction())
        state.transactions.add(make_transaction(description="Second"))
        assert state.writer.pending_count == 2

    @pytest.mark.asyncio
    async def test_last_write_wins(self, app_settings, backend, make_transaction):
        state = create_app_state(app_settings, backend=backend)
        state.transactions.add(make_transaction(description="First"))
        state.transactions.add(make_transaction(description="Second"))

        assert await state.flush() is True
        stored = await state.store.load("transactions")
        assert [t["description"] for t in stored] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_failed_write_keeps_memory(self, app_settings, flaky_backend_factory,
                                             make_transaction):
        backend = flaky_backend_factory({"budgetwise_transactions"})
        state = create_app_state(app_settings, backend=backend)

        added = state.transactions.add(make_transaction())
        assert await state.flush() is False
        assert state.transactions.get(added.id) is not None
        assert await state.store.load("transactions") is None


class TestBackupRestore:
    """Tests for AppState.create_backup / restore_backup."""

    @pytest.mark.asyncio
    async def test_backup_includes_pending_writes(self, state, make_transaction):
        added = state.transactions.add(make_transaction())
        backup = json.loads(await state.create_backup())
        assert backup["transactions"][0]["id"] == added.id

    @pytest.mark.asyncio
    async def test_restore_reloads_stores(self, state, make_transaction, make_budget):
        state.transactions.add(make_transaction(description="Kept"))
        state.budgets.add(make_budget())
        snapshot = await state.create_backup()

        await state.wipe()
        assert len(state.transactions) == 0

        assert await state.restore_backup(snapshot) is True
        assert [t.description for t in state.transactions.transactions] == ["Kept"]
        assert len(state.budgets) == 1

    @pytest.mark.asyncio
    async def test_rejected_restore_changes_nothing(self, state, make_transaction):
        state.transactions.add(make_transaction())
        await state.flush()

        assert await state.restore_backup(json.dumps({"version": "1.0.0"})) is False
        assert len(state.transactions) == 1

    @pytest.mark.asyncio
    async def test_restore_empty_lists(self, state, make_transaction):
        state.transactions.add(make_transaction())
        snapshot = json.dumps({"transactions": [], "budgets": []})

        assert await state.restore_backup(snapshot) is True
        assert len(state.transactions) == 0


class TestIntegrityAndWipe:

    @pytest.mark.asyncio
    async def test_verify_integrity_on_clean_state(self, state, make_transaction):
        state.transactions.add(make_transaction())
        state.settings.update_group("profile", {"name": "Ada"})

        report = await state.verify_integrity()
        assert report.is_valid is True

    @pytest.mark.asyncio
    async def test_verify_integrity_flags_bad_records(self, state, store):
        await store.save("budgets", [{"id": "b1", "category": "Food"}])

        report = await state.verify_integrity()
        assert report.messages == ["Budget 0: Missing required fields (budgetAmount)"]

    @pytest.mark.asyncio
    async def test_wipe_resets_memory_and_storage(self, state, backend, make_transaction):
        await backend.set_item("unrelated", "stays")
        state.transactions.add(make_transaction())
        state.settings.update_group("profile", {"name": "Ada"})
        state.analytics.add_insight({"type": "info", "title": "Tip", "description": "x"})

        assert await state.wipe() is True
        assert len(state.transactions) == 0
        assert state.settings.profile.name == "John Doe"
        assert state.analytics.insights == []
        assert backend.raw() == {"unrelated": "stays"}


class TestFactory:

    def test_create_app_state_with_memory_backend(self, app_settings):
        state = create_app_state(app_settings)
        assert isinstance(state, AppState)
        assert isinstance(state.store, KeyValueStore)
        assert state.store.prefix == "budgetwise_"
