"""Application state: the four stores and their container."""

from budgetwise.state.transactions import TransactionLedger
from budgetwise.state.budgets import BudgetRegistry
from budgetwise.state.settings import SettingsStore, default_settings
from budgetwise.state.analytics import AnalyticsAggregator
from budgetwise.state.app import AppState, create_app_state, create_backend

__all__ = [
    "AnalyticsAggregator",
    "AppState",
    "BudgetRegistry",
    "SettingsStore",
    "TransactionLedger",
    "create_app_state",
    "create_backend",
    "default_settings",
]
