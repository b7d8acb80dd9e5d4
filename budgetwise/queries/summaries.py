"""
Financial Summaries

DESIGN DECISION: All calculations are DETERMINISTIC and pure.
They take snapshots of ledger and budget records and return new
values; they never touch the stores. The analytics aggregator decides
what to cache.

Amounts are unsigned Decimal magnitudes; direction comes from the
transaction type, so income and expense totals are both non-negative
here. Percentages and rates are floats, for display only.
"""

import calendar
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from budgetwise.models.analytics import (
    BudgetRisk,
    CategoryTotal,
    CategoryTrend,
    FinancialPrediction,
    FinancialSummary,
    InsightDraft,
    InsightType,
    MonthlyTrend,
    ReportDraft,
    RiskLevel,
    SpendingPattern,
    WeeklyTrend,
)
from budgetwise.models.base import ZERO
from budgetwise.models.budget import Budget, BudgetStatus, Period
from budgetwise.models.transaction import Transaction, TransactionType


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def filter_window(
    transactions: Iterable[Transaction],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Transaction]:
    """Transactions dated within [start, end] (either bound optional)."""
    result = []
    for transaction in transactions:
        if start and transaction.transaction_date < start:
            continue
        if end and transaction.transaction_date > end:
            continue
        result.append(transaction)
    return result


def summarize(transactions: Iterable[Transaction]) -> FinancialSummary:
    """Income, expense and net totals plus the savings rate."""
    income = ZERO
    expenses = ZERO
    count = 0
    for transaction in transactions:
        count += 1
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        else:
            expenses += transaction.amount

    net = income - expenses
    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        net_amount=net,
        savings_rate=float(net / income * 100) if income > 0 else 0.0,
        transaction_count=count,
    )


def category_totals(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Expense totals per category, largest first."""
    groups: dict[str, Decimal] = defaultdict(Decimal)
    for transaction in transactions:
        if transaction.is_expense:
            groups[transaction.category] += transaction.amount

    ordered = sorted(groups.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=category, amount=amount) for category, amount in ordered]


def period_window(period: Period, today: date) -> tuple[date, date]:
    """
    The calendar window of `period` containing `today`.

    weekly  - Monday to Sunday
    monthly - first to last day of the month
    yearly  - January 1 to December 31
    """
    period = Period(period)
    if period == Period.WEEKLY:
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if period == Period.MONTHLY:
        return _month_bounds(today.year, today.month)
    return date(today.year, 1, 1), date(today.year, 12, 31)


def build_report(
    transactions: Iterable[Transaction],
    period: Period,
    start: date,
    end: date,
    top_n: int = 5,
) -> ReportDraft:
    """Report figures for the transactions dated inside [start, end]."""
    window = filter_window(transactions, start, end)
    summary = summarize(window)
    return ReportDraft(
        period=period,
        start_date=start,
        end_date=end,
        total_income=summary.total_income,
        total_expenses=summary.total_expenses,
        net_amount=summary.net_amount,
        top_categories=category_totals(window)[:top_n],
    )


def _monthly_totals(
    transactions: list[Transaction],
    year: int,
    month: int,
    transaction_type: TransactionType,
) -> tuple[Decimal, int]:
    start, end = _month_bounds(year, month)
    matching = [
        t for t in filter_window(transactions, start, end)
        if t.type == transaction_type
    ]
    return sum((t.amount for t in matching), ZERO), len(matching)


def spending_patterns(
    transactions: Iterable[Transaction],
    today: date,
    weeks: int = 4,
    months: int = 6,
) -> SpendingPattern:
    """
    Expense trend buckets ending at `today`.

    weekly_trends  - `weeks` rolling seven-day buckets, oldest first
    monthly_trends - the last `months` calendar months, oldest first
    category_trends - share of all expenses per category
    """
    expenses = [t for t in transactions if t.is_expense]

    weekly = []
    for offset in range(weeks - 1, -1, -1):
        end = today - timedelta(days=7 * offset)
        start = end - timedelta(days=6)
        amount = sum((t.amount for t in filter_window(expenses, start, end)), ZERO)
        weekly.append(WeeklyTrend(week=f"Week {weeks - offset}", amount=amount))

    monthly = []
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        amount, _ = _monthly_totals(expenses, year, month, TransactionType.EXPENSE)
        monthly.append(MonthlyTrend(month=calendar.month_abbr[month], amount=amount))

    totals = category_totals(expenses)
    grand_total = sum((item.amount for item in totals), ZERO)
    categories = []
    for item in totals:
        share = round(item.amount / grand_total * 100, 1) if grand_total else ZERO
        categories.append(CategoryTrend(
            category=item.category,
            amount=item.amount,
            percentage=float(share),
        ))

    return SpendingPattern(
        weekly_trends=weekly,
        monthly_trends=monthly,
        category_trends=categories,
    )


def budget_risk_level(budget: Budget) -> RiskLevel:
    """high when over the cap, medium at the alert threshold, else low."""
    status = budget.status
    if status == BudgetStatus.OVER:
        return RiskLevel.HIGH
    if status == BudgetStatus.WARNING:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def predict(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    today: date,
    lookback_months: int = 3,
) -> FinancialPrediction:
    """
    Naive next-month forecast.

    Spending is the mean expense total of the last `lookback_months`
    complete months that have any activity; the current month is used
    when none do. The savings projection applies the same averaging to
    income and subtracts predicted spending.
    """
    transactions = list(transactions)

    spent_samples = []
    earned_samples = []
    for offset in range(1, lookback_months + 1):
        year, month = _shift_month(today.year, today.month, -offset)
        spent, spent_count = _monthly_totals(transactions, year, month, TransactionType.EXPENSE)
        earned, earned_count = _monthly_totals(transactions, year, month, TransactionType.INCOME)
        if spent_count or earned_count:
            spent_samples.append(spent)
            earned_samples.append(earned)

    if not spent_samples:
        spent, _ = _monthly_totals(transactions, today.year, today.month, TransactionType.EXPENSE)
        earned, _ = _monthly_totals(transactions, today.year, today.month, TransactionType.INCOME)
        spent_samples, earned_samples = [spent], [earned]

    next_month_spending = sum(spent_samples) / len(spent_samples)
    expected_income = sum(earned_samples) / len(earned_samples)

    return FinancialPrediction(
        next_month_spending=round(next_month_spending, 2),
        budget_risk=[
            BudgetRisk(category=budget.category, risk_level=budget_risk_level(budget))
            for budget in budgets
        ],
        savings_projection=round(expected_income - next_month_spending, 2),
    )


def budget_insights(budgets: Iterable[Budget]) -> list[InsightDraft]:
    """An error insight per exceeded budget, a warning per alerting one."""
    insights = []
    for budget in budgets:
        status = budget.status
        if status == BudgetStatus.OVER:
            insights.append(InsightDraft(
                type=InsightType.ERROR,
                title=f"{budget.category} Budget Exceeded",
                description=(
                    f"You have spent {budget.percentage_used:.0f}% of your "
                    f"{budget.period.value} {budget.category} budget"
                ),
                action="Review recent purchases",
                category=budget.category,
            ))
        elif status == BudgetStatus.WARNING:
            insights.append(InsightDraft(
                type=InsightType.WARNING,
                title=f"{budget.category} Spending Alert",
                description=(
                    f"You have reached {budget.percentage_used:.0f}% of your "
                    f"{budget.period.value} {budget.category} budget"
                ),
                action="Adjust budget",
                category=budget.category,
            ))
    return insights
