"""
Budget Models

A budget caps spending for one category over a period. `spent_amount`
is accumulated explicitly by callers and may exceed `budget_amount`.
"""

import calendar
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from budgetwise.models.base import ZERO, Money, RecordModel, new_id


class Period(str, Enum):
    """Budget and report periods."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BudgetStatus(str, Enum):
    """How close a budget is to its cap."""
    GOOD = "good"
    WARNING = "warning"
    OVER = "over"


def compute_period_end(period: Period, start: date) -> date:
    """
    Compute the end date of a budget period starting on `start`.

    - weekly: seven days later
    - monthly: last day of the start month, or of the following month
      when `start` already is the last day
    - yearly: same day next year (Feb 29 falls back to Feb 28)

    The result is always strictly after `start`.
    """
    period = Period(period)

    if period == Period.WEEKLY:
        return start + timedelta(days=7)

    if period == Period.MONTHLY:
        last_day = calendar.monthrange(start.year, start.month)[1]
        end = start.replace(day=last_day)
        if end == start:
            following = start + timedelta(days=1)
            last_day = calendar.monthrange(following.year, following.month)[1]
            end = following.replace(day=last_day)
        return end

    try:
        return start.replace(year=start.year + 1)
    except ValueError:
        return start.replace(year=start.year + 1, day=28)


class BudgetDraft(RecordModel):
    """A budget as entered by the user."""

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category this budget caps"
    )
    budget_amount: Money = Field(
        ...,
        gt=0,
        description="Spending cap for the period"
    )
    period: Period = Field(
        default=Period.MONTHLY,
        description="Budget period"
    )
    start_date: Optional[date] = Field(
        default=None,
        description="Start of the period (defaults to today)"
    )
    end_date: Optional[date] = Field(
        default=None,
        description="End of the period (defaults to one period after start)"
    )
    alert_threshold: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Percentage of the cap that triggers an alert"
    )


class Budget(RecordModel):
    """A spending cap for one category."""

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique budget ID"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    budget_amount: Money = Field(
        ...,
        gt=0,
    )
    spent_amount: Money = Field(
        default=ZERO,
        description="Accumulated spending (not clamped to the cap)"
    )
    period: Period = Period.MONTHLY
    start_date: date
    end_date: date
    alert_threshold: float = Field(
        default=80.0,
        ge=0,
        le=100,
    )

    @model_validator(mode='after')
    def validate_dates(self) -> 'Budget':
        """Validate date relationships."""
        if self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self

    @classmethod
    def from_draft(
        cls,
        draft: BudgetDraft,
        today: Optional[date] = None,
        default_alert_threshold: float = 80.0,
    ) -> "Budget":
        """Create a budget with a fresh id, zero spending and derived dates."""
        start = draft.start_date or today or date.today()
        end = draft.end_date or compute_period_end(draft.period, start)
        threshold = draft.alert_threshold
        if threshold is None:
            threshold = default_alert_threshold

        return cls(
            id=new_id(),
            category=draft.category,
            budget_amount=draft.budget_amount,
            spent_amount=ZERO,
            period=draft.period,
            start_date=start,
            end_date=end,
            alert_threshold=threshold,
        )

    @property
    def percentage_used(self) -> float:
        """Spent amount as a percentage of the cap (for display)."""
        return float(self.spent_amount / self.budget_amount * 100)

    @property
    def remaining(self) -> Decimal:
        """Amount left before the cap (negative when over)."""
        return self.budget_amount - self.spent_amount

    @property
    def is_over(self) -> bool:
        return self.spent_amount > self.budget_amount

    @property
    def is_alerting(self) -> bool:
        # Exact comparison: spent / cap * 100 >= threshold
        threshold = Decimal(str(self.alert_threshold))
        return self.spent_amount * 100 >= self.budget_amount * threshold

    @property
    def status(self) -> BudgetStatus:
        """
        Classify the budget.

        over    - 100% or more of the cap is spent
        warning - the alert threshold is reached
        good    - otherwise
        """
        if self.spent_amount >= self.budget_amount:
            return BudgetStatus.OVER
        if self.is_alerting:
            return BudgetStatus.WARNING
        return BudgetStatus.GOOD
