"""
Analytics Models

Insights, trend summaries, predictions and reports are caches derived
from the ledger and budgets. They are never authoritative.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from budgetwise.models.base import ZERO, Money, RecordModel, new_id, utc_now
from budgetwise.models.budget import Period


class InsightType(str, Enum):
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# INSIGHTS
# =============================================================================

class InsightDraft(RecordModel):
    """An insight before it is stamped with id and date."""

    type: InsightType
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=1000)
    action: Optional[str] = None
    category: Optional[str] = None


class Insight(InsightDraft):
    """
    A financial insight shown to the user.

    Insights are dismissed (soft-deleted) rather than removed;
    purging dismissed insights is a separate sweep.
    """

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utc_now, alias="date")
    dismissed: bool = False


# =============================================================================
# SPENDING PATTERNS & PREDICTIONS
# =============================================================================

class WeeklyTrend(RecordModel):
    week: str
    amount: Money


class MonthlyTrend(RecordModel):
    month: str
    amount: Money


class CategoryTrend(RecordModel):
    category: str
    amount: Money
    percentage: float


class SpendingPattern(RecordModel):
    weekly_trends: list[WeeklyTrend] = Field(default_factory=list)
    monthly_trends: list[MonthlyTrend] = Field(default_factory=list)
    category_trends: list[CategoryTrend] = Field(default_factory=list)
    last_updated: Optional[datetime] = None


class BudgetRisk(RecordModel):
    category: str
    risk_level: RiskLevel


class FinancialPrediction(RecordModel):
    next_month_spending: Money = ZERO
    budget_risk: list[BudgetRisk] = Field(default_factory=list)
    savings_projection: Money = ZERO
    last_updated: Optional[datetime] = None


# =============================================================================
# REPORTS
# =============================================================================

class CategoryTotal(RecordModel):
    category: str
    amount: Money


class ReportDraft(RecordModel):
    """Report figures for one period window."""

    period: Period
    start_date: date
    end_date: date
    total_income: Money = ZERO
    total_expenses: Money = ZERO
    net_amount: Money = ZERO
    top_categories: list[CategoryTotal] = Field(default_factory=list)


class FinancialReport(ReportDraft):
    """A generated report snapshot."""

    id: str = Field(default_factory=new_id)
    generated_at: datetime = Field(default_factory=utc_now)


class ReportHistory(RecordModel):
    """Per-period report history, newest first."""

    weekly: list[FinancialReport] = Field(default_factory=list)
    monthly: list[FinancialReport] = Field(default_factory=list)
    yearly: list[FinancialReport] = Field(default_factory=list)

    def for_period(self, period: Period) -> list[FinancialReport]:
        return getattr(self, Period(period).value)


class FinancialSummary(RecordModel):
    """Totals over a set of transactions."""

    total_income: Money = ZERO
    total_expenses: Money = ZERO
    net_amount: Money = ZERO
    savings_rate: float = Field(
        default=0.0,
        description="Net amount as a percentage of income (0 when no income)"
    )
    transaction_count: int = 0
