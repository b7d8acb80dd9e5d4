"""
Tests for the analytics aggregator and the summary calculations
it is built from.
"""

from datetime import date
from decimal import Decimal

import pytest

from budgetwise.models import (
    InsightType,
    Period,
    RiskLevel,
    Transaction,
)
from budgetwise.queries import (
    build_report,
    category_totals,
    period_window,
    predict,
    spending_patterns,
    summarize,
)
from budgetwise.state import AnalyticsAggregator, BudgetRegistry, TransactionLedger


def _report_draft(period: str = "weekly", start: str = "2024-03-11", end: str = "2024-03-17") -> dict:
    return {
        "period": period,
        "startDate": start,
        "endDate": end,
        "totalIncome": 100,
        "totalExpenses": 40,
        "netAmount": 60,
    }


@pytest.fixture
def analytics() -> AnalyticsAggregator:
    return AnalyticsAggregator()


@pytest.fixture
def transactions(make_transaction) -> list[Transaction]:
    rows = [
        make_transaction(description="Salary", amount=3000, type="income",
                         category="Income", date="2024-03-01"),
        make_transaction(description="Rent", amount=1200, category="Housing",
                         date="2024-03-02"),
        make_transaction(description="Groceries", amount=150, date="2024-03-12"),
        make_transaction(description="Bus pass", amount=50, category="Transport",
                         date="2024-03-14"),
        make_transaction(description="Salary", amount=3000, type="income",
                         category="Income", date="2024-02-01"),
        make_transaction(description="Groceries", amount=400, date="2024-02-10"),
        make_transaction(description="Groceries", amount=200, date="2024-01-10"),
    ]
    return [Transaction.model_validate({**row, "id": f"t{i}"}) for i, row in enumerate(rows)]


class TestInsights:
    """Tests for the insight lifecycle."""

    def test_add_prepends_and_stamps(self, analytics):
        analytics.add_insight({"type": "info", "title": "First", "description": "a"})
        latest = analytics.add_insight({"type": "success", "title": "Second", "description": "b"})

        assert [i.title for i in analytics.insights] == ["Second", "First"]
        assert latest.id
        assert latest.dismissed is False
        assert latest.created_at is not None

    def test_dismiss_keeps_insight_until_purged(self, analytics):
        insight = analytics.add_insight({"type": "info", "title": "Tip", "description": "x"})
        analytics.add_insight({"type": "warning", "title": "Careful", "description": "y"})

        assert analytics.dismiss_insight(insight.id) is True
        assert len(analytics.insights) == 2
        assert [i.title for i in analytics.active_insights()] == ["Careful"]

        assert analytics.purge_dismissed() == 1
        assert [i.title for i in analytics.insights] == ["Careful"]

    def test_dismiss_unknown_insight(self, analytics):
        assert analytics.dismiss_insight("missing") is False

    def test_insights_by_type_excludes_dismissed(self, analytics):
        kept = analytics.add_insight({"type": "warning", "title": "A", "description": "a"})
        gone = analytics.add_insight({"type": "warning", "title": "B", "description": "b"})
        analytics.dismiss_insight(gone.id)

        assert analytics.insights_by_type(InsightType.WARNING) == [analytics.insights[1]]
        assert analytics.insights[1].id == kept.id


class TestReports:
    """Tests for report history retention."""

    def test_weekly_history_capped_newest_first(self, analytics):
        reports = [analytics.generate_report(_report_draft()) for _ in range(13)]

        history = analytics.recent_reports("weekly")
        assert len(history) == 12
        assert history[0].id == reports[-1].id
        assert reports[0].id not in {r.id for r in history}

    def test_yearly_history_capped_at_five(self, analytics):
        for year in range(2018, 2025):
            analytics.generate_report(_report_draft("yearly", f"{year}-01-01", f"{year}-12-31"))

        history = analytics.recent_reports(Period.YEARLY)
        assert [r.start_date.year for r in history] == [2024, 2023, 2022, 2021, 2020]

    def test_periods_are_independent(self, analytics):
        analytics.generate_report(_report_draft("weekly"))
        analytics.generate_report(_report_draft("monthly", "2024-03-01", "2024-03-31"))

        assert len(analytics.recent_reports("weekly")) == 1
        assert analytics.latest_report("monthly").period == Period.MONTHLY
        assert analytics.latest_report("yearly") is None

    def test_retention_override(self):
        analytics = AnalyticsAggregator(retention={"weekly": 2})
        for _ in range(4):
            analytics.generate_report(_report_draft())
        assert len(analytics.recent_reports("weekly")) == 2
        assert analytics.retention_for("monthly") == 12

    def test_report_for_current_window(self, analytics, transactions, today):
        ledger = TransactionLedger()
        ledger.replace_all(transactions)

        report = analytics.report_for(ledger, "monthly", today=today)
        assert report.start_date == date(2024, 3, 1)
        assert report.end_date == date(2024, 3, 31)
        assert report.total_income == 3000
        assert report.total_expenses == 1400
        assert report.top_categories[0].category == "Housing"


class TestPatternsAndPredictions:

    def test_update_spending_patterns_merges_and_stamps(self, analytics):
        analytics.update_spending_patterns({
            "weeklyTrends": [{"week": "Week 1", "amount": 10}],
        })
        patterns = analytics.update_spending_patterns({
            "categoryTrends": [{"category": "Food", "amount": 10, "percentage": 100}],
        })

        assert patterns.weekly_trends[0].amount == 10
        assert patterns.category_trends[0].category == "Food"
        assert patterns.last_updated is not None

    def test_update_predictions(self, analytics):
        predictions = analytics.update_predictions({"nextMonthSpending": 1234.5})
        assert predictions.next_month_spending == Decimal("1234.5")
        assert predictions.savings_projection == 0
        assert predictions.last_updated is not None

    def test_refresh_derives_caches_and_budget_insights(self, analytics, transactions, today):
        ledger = TransactionLedger()
        ledger.replace_all(transactions)
        registry = BudgetRegistry()
        food = registry.add({"category": "Food", "budgetAmount": 100,
                             "startDate": "2024-03-01"})
        registry.accumulate_spent("Food", 150, budget_id=food.id)

        analytics.refresh(ledger, registry, today=today)
        analytics.refresh(ledger, registry, today=today)

        assert len(analytics.spending_patterns.weekly_trends) == 4
        assert analytics.predictions.budget_risk[0].risk_level == RiskLevel.HIGH
        titles = [i.title for i in analytics.active_insights()]
        assert titles == ["Food Budget Exceeded"]

    def test_clear_all(self, analytics):
        analytics.add_insight({"type": "info", "title": "Tip", "description": "x"})
        analytics.generate_report(_report_draft())
        analytics.update_predictions({"nextMonthSpending": 5})

        analytics.clear_all()
        assert analytics.insights == []
        assert analytics.recent_reports("weekly") == []
        assert analytics.predictions.next_month_spending == 0


class TestSummaries:
    """Tests for the pure calculations."""

    def test_summarize(self, transactions):
        summary = summarize(transactions)
        assert summary.total_income == 6000
        assert summary.total_expenses == 2000
        assert summary.net_amount == 4000
        assert summary.savings_rate == pytest.approx(66.666, rel=1e-3)
        assert summary.transaction_count == 7

    def test_summarize_without_income(self):
        assert summarize([]).savings_rate == 0

    def test_category_totals_are_expense_only_and_sorted(self, transactions):
        totals = category_totals(transactions)
        assert [(t.category, t.amount) for t in totals] == [
            ("Housing", 1200), ("Food", 750), ("Transport", 50),
        ]

    def test_period_windows(self, today):
        assert period_window(Period.WEEKLY, today) == (date(2024, 3, 11), date(2024, 3, 17))
        assert period_window(Period.MONTHLY, date(2024, 2, 5)) == (
            date(2024, 2, 1), date(2024, 2, 29),
        )
        assert period_window(Period.YEARLY, today) == (date(2024, 1, 1), date(2024, 12, 31))

    def test_build_report_limits_top_categories(self, transactions):
        draft = build_report(transactions, Period.YEARLY, date(2024, 1, 1),
                             date(2024, 12, 31), top_n=2)
        assert [c.category for c in draft.top_categories] == ["Housing", "Food"]

    def test_spending_patterns(self, transactions, today):
        patterns = spending_patterns(transactions, today, weeks=2, months=3)

        assert [w.week for w in patterns.weekly_trends] == ["Week 1", "Week 2"]
        # 2024-03-09..15 holds Groceries and the bus pass
        assert patterns.weekly_trends[1].amount == 200
        assert [(m.month, m.amount) for m in patterns.monthly_trends] == [
            ("Jan", 200), ("Feb", 400), ("Mar", 1400),
        ]
        assert patterns.category_trends[0].percentage == 60.0

    def test_predict_averages_previous_months(self, transactions, today):
        prediction = predict(transactions, [], today)
        # January and February have activity; December does not
        assert prediction.next_month_spending == 300
        assert prediction.savings_projection == 1200

    def test_predict_falls_back_to_current_month(self, make_transaction, today):
        current = [Transaction.model_validate({**make_transaction(amount=80), "id": "x"})]
        assert predict(current, [], today).next_month_spending == 80
