"""
Analytics Aggregator

Owns derived caches: insights, spending patterns, predictions and the
report history. It reads ledger and budget snapshots on demand
(pull-based) and never mutates them. Staleness is expected; there is
no invalidation protocol.
"""

from datetime import date
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from budgetwise.audit import AuditLogger
from budgetwise.models.analytics import (
    FinancialPrediction,
    FinancialReport,
    Insight,
    InsightDraft,
    InsightType,
    ReportDraft,
    ReportHistory,
    SpendingPattern,
)
from budgetwise.models.audit import AuditEventType
from budgetwise.models.base import merge_partial, new_id, utc_now
from budgetwise.models.budget import Period
from budgetwise.queries import summaries
from budgetwise.services.storage import WriteQueue
from budgetwise.state.base import PersistentSlice, dump_all
from budgetwise.state.budgets import BudgetRegistry
from budgetwise.state.transactions import TransactionLedger

INSIGHTS_KEY = "insights"
PATTERNS_KEY = "spendingPatterns"
PREDICTIONS_KEY = "predictions"
REPORTS_KEY = "reports"

DEFAULT_RETENTION = {
    Period.WEEKLY: 12,
    Period.MONTHLY: 12,
    Period.YEARLY: 5,
}


class AnalyticsAggregator(PersistentSlice):
    """Derived financial analytics."""

    def __init__(
        self,
        writer: Optional[WriteQueue] = None,
        audit_logger: Optional[AuditLogger] = None,
        retention: Optional[Mapping[Union[Period, str], int]] = None,
    ):
        super().__init__(writer, audit_logger)
        self._retention = dict(DEFAULT_RETENTION)
        for period, cap in (retention or {}).items():
            self._retention[Period(period)] = cap

        self._insights: list[Insight] = []
        self._patterns = SpendingPattern()
        self._predictions = FinancialPrediction()
        self._reports = ReportHistory()

    @property
    def insights(self) -> list[Insight]:
        return list(self._insights)

    @property
    def spending_patterns(self) -> SpendingPattern:
        return self._patterns

    @property
    def predictions(self) -> FinancialPrediction:
        return self._predictions

    @property
    def reports(self) -> ReportHistory:
        return self._reports

    def retention_for(self, period: Union[Period, str]) -> int:
        return self._retention[Period(period)]

    def _save_insights(self) -> None:
        self._persist(INSIGHTS_KEY, dump_all(self._insights))

    def _save_reports(self) -> None:
        self._persist(REPORTS_KEY, self._reports.to_storage())

    # =========================================================================
    # HYDRATION
    # =========================================================================

    def hydrate(
        self,
        insights: Any = None,
        patterns: Any = None,
        predictions: Any = None,
        reports: Any = None,
    ) -> None:
        """Replace memory with decoded stored values. Does not persist."""
        records = self._validate_records(Insight, insights, INSIGHTS_KEY)
        if records is not None:
            self._insights = records

        for key, raw, model, attr in (
            (PATTERNS_KEY, patterns, SpendingPattern, "_patterns"),
            (PREDICTIONS_KEY, predictions, FinancialPrediction, "_predictions"),
            (REPORTS_KEY, reports, ReportHistory, "_reports"),
        ):
            if raw is None:
                continue
            try:
                setattr(self, attr, model.model_validate(raw))
            except ValidationError as e:
                self._logger.warning(
                    "stored_analytics_invalid",
                    key=key,
                    error_count=e.error_count(),
                )

    # =========================================================================
    # INSIGHTS
    # =========================================================================

    def add_insight(self, draft: Union[InsightDraft, Mapping[str, Any]]) -> Insight:
        """Stamp an insight with id and date and put it first."""
        insight_draft = InsightDraft.model_validate(draft)
        insight = Insight(
            **insight_draft.model_dump(include=set(InsightDraft.model_fields)),
            id=new_id(),
            created_at=utc_now(),
            dismissed=False,
        )
        self._insights.insert(0, insight)
        self._save_insights()

        self._audit.record(
            AuditEventType.INSIGHT_ADDED,
            f"Insight added: {insight.title}",
            entity_type="insight",
            entity_id=insight.id,
            insight_type=insight.type.value,
        )
        return insight

    def dismiss_insight(self, insight_id: str) -> bool:
        """Flag an insight as dismissed. It stays until purge_dismissed()."""
        for index, insight in enumerate(self._insights):
            if insight.id == insight_id:
                self._insights[index] = insight.model_copy(update={"dismissed": True})
                self._save_insights()
                self._audit.record(
                    AuditEventType.INSIGHT_DISMISSED,
                    f"Insight dismissed: {insight.title}",
                    entity_type="insight",
                    entity_id=insight_id,
                )
                return True
        return False

    def purge_dismissed(self) -> int:
        """Remove dismissed insights. Returns how many were removed."""
        kept = [i for i in self._insights if not i.dismissed]
        removed = len(self._insights) - len(kept)
        self._insights = kept
        self._save_insights()

        self._audit.record(
            AuditEventType.INSIGHTS_PURGED,
            f"Purged {removed} dismissed insights",
            entity_type="insight",
            removed=removed,
        )
        return removed

    def active_insights(self) -> list[Insight]:
        return [i for i in self._insights if not i.dismissed]

    def insights_by_type(self, insight_type: InsightType) -> list[Insight]:
        insight_type = InsightType(insight_type)
        return [i for i in self._insights if i.type == insight_type and not i.dismissed]

    # =========================================================================
    # PATTERNS & PREDICTIONS
    # =========================================================================

    def update_spending_patterns(
        self,
        partial: Union[SpendingPattern, Mapping[str, Any]],
    ) -> SpendingPattern:
        """Shallow-merge into the cached patterns and stamp last_updated."""
        if isinstance(partial, SpendingPattern):
            partial = {
                name: getattr(partial, name)
                for name in partial.model_fields_set
            }
        merged, _ = merge_partial(self._patterns, partial)
        self._patterns = merged.model_copy(update={"last_updated": utc_now()})
        self._persist(PATTERNS_KEY, self._patterns.to_storage())

        self._audit.record(
            AuditEventType.SPENDING_PATTERNS_UPDATED,
            "Spending patterns updated",
            entity_type="analytics",
            entity_id=PATTERNS_KEY,
        )
        return self._patterns

    def update_predictions(
        self,
        partial: Union[FinancialPrediction, Mapping[str, Any]],
    ) -> FinancialPrediction:
        """Shallow-merge into the cached predictions and stamp last_updated."""
        if isinstance(partial, FinancialPrediction):
            partial = {
                name: getattr(partial, name)
                for name in partial.model_fields_set
            }
        merged, _ = merge_partial(self._predictions, partial)
        self._predictions = merged.model_copy(update={"last_updated": utc_now()})
        self._persist(PREDICTIONS_KEY, self._predictions.to_storage())

        self._audit.record(
            AuditEventType.PREDICTIONS_UPDATED,
            "Predictions updated",
            entity_type="analytics",
            entity_id=PREDICTIONS_KEY,
        )
        return self._predictions

    # =========================================================================
    # REPORTS
    # =========================================================================

    def generate_report(self, draft: Union[ReportDraft, Mapping[str, Any]]) -> FinancialReport:
        """
        Stamp a report and put it first in its period's history.

        The history is then truncated to the period's retention cap,
        dropping the oldest entries.
        """
        report_draft = ReportDraft.model_validate(draft)
        report = FinancialReport(
            **report_draft.model_dump(include=set(ReportDraft.model_fields)),
            id=new_id(),
            generated_at=utc_now(),
        )

        period = report.period
        history = [report] + self._reports.for_period(period)
        history = history[:self._retention[period]]
        self._reports = self._reports.model_copy(update={period.value: history})
        self._save_reports()

        self._audit.record(
            AuditEventType.REPORT_GENERATED,
            f"{period.value.capitalize()} report generated",
            entity_type="report",
            entity_id=report.id,
            start_date=report.start_date.isoformat(),
            end_date=report.end_date.isoformat(),
        )
        return report

    def recent_reports(self, period: Union[Period, str]) -> list[FinancialReport]:
        return list(self._reports.for_period(Period(period)))

    def latest_report(self, period: Union[Period, str]) -> Optional[FinancialReport]:
        history = self._reports.for_period(Period(period))
        return history[0] if history else None

    # =========================================================================
    # DERIVATION FROM THE OTHER STORES
    # =========================================================================

    def refresh(
        self,
        ledger: TransactionLedger,
        registry: BudgetRegistry,
        today: Optional[date] = None,
    ) -> None:
        """
        Recompute patterns and predictions from current snapshots, and
        add a budget insight for every alerting budget that does not
        already have an active one.
        """
        today = today or date.today()
        transactions = ledger.transactions
        budgets = registry.budgets

        patterns = summaries.spending_patterns(transactions, today)
        self.update_spending_patterns({
            "weekly_trends": patterns.weekly_trends,
            "monthly_trends": patterns.monthly_trends,
            "category_trends": patterns.category_trends,
        })

        prediction = summaries.predict(transactions, budgets, today)
        self.update_predictions({
            "next_month_spending": prediction.next_month_spending,
            "budget_risk": prediction.budget_risk,
            "savings_projection": prediction.savings_projection,
        })

        active = {(i.title, i.category) for i in self.active_insights()}
        for draft in summaries.budget_insights(budgets):
            if (draft.title, draft.category) not in active:
                self.add_insight(draft)

    def report_for(
        self,
        ledger: TransactionLedger,
        period: Union[Period, str],
        today: Optional[date] = None,
    ) -> FinancialReport:
        """Build and store the report for the current `period` window."""
        period = Period(period)
        start, end = summaries.period_window(period, today or date.today())
        draft = summaries.build_report(ledger.transactions, period, start, end)
        return self.generate_report(draft)

    def clear_all(self) -> None:
        """Reset every cache to empty."""
        self._insights = []
        self._patterns = SpendingPattern()
        self._predictions = FinancialPrediction()
        self._reports = ReportHistory()

        self._save_insights()
        self._persist(PATTERNS_KEY, self._patterns.to_storage())
        self._persist(PREDICTIONS_KEY, self._predictions.to_storage())
        self._save_reports()

        self._audit.record(
            AuditEventType.ANALYTICS_CLEARED,
            "Analytics data cleared",
            entity_type="analytics",
        )
