"""
Shared fixtures.

Test strategy:
1. Unit tests for models and pure calculations
2. Store tests against an in-memory backend
3. File backend tests under tmp_path (no real user data touched)
"""

from datetime import date
from typing import Optional

import pytest

from budgetwise.config import AppSettings
from budgetwise.services.storage import (
    BackendUnavailableError,
    InMemoryBackend,
    KeyValueStore,
)
from budgetwise.state import AppState, create_app_state


class FlakyBackend(InMemoryBackend):
    """In-memory backend whose writes fail for selected keys."""

    def __init__(self, failing_keys: Optional[set[str]] = None, **kwargs):
        super().__init__(**kwargs)
        self.failing_keys = failing_keys or set()
        self.write_count = 0

    async def set_item(self, key: str, value: str) -> None:
        self.write_count += 1
        if key in self.failing_keys:
            raise BackendUnavailableError(f"Simulated failure writing {key}")
        await super().set_item(key, value)


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    return AppSettings(
        storage_backend="memory",
        data_dir=tmp_path / "data",
        log_json=False,
    )


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend) -> KeyValueStore:
    return KeyValueStore(backend, prefix="budgetwise_")


@pytest.fixture
def state(app_settings, backend) -> AppState:
    return create_app_state(app_settings, backend=backend)


@pytest.fixture
def today() -> date:
    return date(2024, 3, 15)


def _transaction_data(**overrides) -> dict:
    data = {
        "description": "Grocery Store",
        "amount": 85.5,
        "type": "expense",
        "category": "Food",
        "date": "2024-03-10",
    }
    data.update(overrides)
    return data


def _budget_data(**overrides) -> dict:
    data = {
        "category": "Food",
        "budgetAmount": 100,
        "period": "monthly",
        "startDate": "2024-03-01",
        "alertThreshold": 80,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_transaction():
    """Factory for transaction input dicts (camelCase, as a form would send)."""
    return _transaction_data


@pytest.fixture
def make_budget():
    """Factory for budget input dicts."""
    return _budget_data


@pytest.fixture
def flaky_backend_factory():
    """Factory for backends that fail writes to selected (prefixed) keys."""
    return FlakyBackend
