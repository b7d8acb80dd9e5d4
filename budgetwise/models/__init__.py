"""
Data Models Package

This package contains all Pydantic models used by BudgetWise.
All data flowing into the stores must conform to these schemas.
"""

from budgetwise.models.base import (
    ZERO,
    Money,
    RecordModel,
    merge_partial,
    new_id,
    to_money,
    utc_now,
)
from budgetwise.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionType,
)
from budgetwise.models.budget import (
    Budget,
    BudgetDraft,
    BudgetStatus,
    Period,
    compute_period_end,
)
from budgetwise.models.user_settings import (
    SETTINGS_MODELS,
    AppearanceSettings,
    FontSize,
    NotificationSettings,
    PreferencesSettings,
    SecuritySettings,
    SettingsGroup,
    Theme,
    UserProfile,
)
from budgetwise.models.analytics import (
    BudgetRisk,
    CategoryTotal,
    CategoryTrend,
    FinancialPrediction,
    FinancialReport,
    FinancialSummary,
    Insight,
    InsightDraft,
    InsightType,
    MonthlyTrend,
    ReportDraft,
    ReportHistory,
    RiskLevel,
    SpendingPattern,
    WeeklyTrend,
)
from budgetwise.models.integrity import IntegrityIssue, IntegrityReport
from budgetwise.models.audit import (
    AuditEvent,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Base
    "ZERO",
    "Money",
    "RecordModel",
    "merge_partial",
    "new_id",
    "to_money",
    "utc_now",
    # Ledger
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    # Budgets
    "Budget",
    "BudgetDraft",
    "BudgetStatus",
    "Period",
    "compute_period_end",
    # Settings
    "SETTINGS_MODELS",
    "AppearanceSettings",
    "FontSize",
    "NotificationSettings",
    "PreferencesSettings",
    "SecuritySettings",
    "SettingsGroup",
    "Theme",
    "UserProfile",
    # Analytics
    "BudgetRisk",
    "CategoryTotal",
    "CategoryTrend",
    "FinancialPrediction",
    "FinancialReport",
    "FinancialSummary",
    "Insight",
    "InsightDraft",
    "InsightType",
    "MonthlyTrend",
    "ReportDraft",
    "ReportHistory",
    "RiskLevel",
    "SpendingPattern",
    "WeeklyTrend",
    # Integrity
    "IntegrityIssue",
    "IntegrityReport",
    # Audit
    "AuditEvent",
    "AuditEventType",
    "AuditSeverity",
]
