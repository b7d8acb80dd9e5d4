"""Financial summary calculations."""

from budgetwise.queries.summaries import (
    budget_insights,
    budget_risk_level,
    build_report,
    category_totals,
    filter_window,
    period_window,
    predict,
    spending_patterns,
    summarize,
)

__all__ = [
    "budget_insights",
    "budget_risk_level",
    "build_report",
    "category_totals",
    "filter_window",
    "period_window",
    "predict",
    "spending_patterns",
    "summarize",
]
