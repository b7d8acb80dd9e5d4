"""
Budget Registry

Per-category spending caps. Persisted as a whole under the `budgets`
key after every mutation.

Several budgets may share a category. accumulate_spent() therefore
accepts an explicit budget id; without one it falls back to the first
budget in the category and logs the ambiguity.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from budgetwise.audit import AuditLogger
from budgetwise.models.audit import AuditEventType
from budgetwise.models.base import ZERO, to_money
from budgetwise.models.budget import Budget, BudgetDraft, compute_period_end
from budgetwise.services.storage import WriteQueue
from budgetwise.state.base import PersistentSlice, dump_all

STORAGE_KEY = "budgets"


class BudgetRegistry(PersistentSlice):
    """The user's budgets, in creation order."""

    def __init__(
        self,
        writer: Optional[WriteQueue] = None,
        audit_logger: Optional[AuditLogger] = None,
        default_alert_threshold: float = 80.0,
    ):
        super().__init__(writer, audit_logger)
        self._budgets: list[Budget] = []
        self._default_alert_threshold = default_alert_threshold

    @property
    def budgets(self) -> list[Budget]:
        return list(self._budgets)

    def __len__(self) -> int:
        return len(self._budgets)

    def _save(self) -> None:
        self._persist(STORAGE_KEY, dump_all(self._budgets))

    def _index_of(self, budget_id: str) -> Optional[int]:
        for index, budget in enumerate(self._budgets):
            if budget.id == budget_id:
                return index
        return None

    def hydrate(self, raw: Any) -> None:
        """Replace memory with a decoded stored value. Does not persist."""
        records = self._validate_records(Budget, raw, STORAGE_KEY)
        if records is not None:
            self._budgets = records

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def add(
        self,
        draft: Union[BudgetDraft, Mapping[str, Any]],
        today: Optional[date] = None,
    ) -> Budget:
        """Create a budget with zero spending and derived period dates."""
        budget = Budget.from_draft(
            BudgetDraft.model_validate(draft),
            today=today,
            default_alert_threshold=self._default_alert_threshold,
        )
        self._budgets.append(budget)
        self._save()

        self._audit.record(
            AuditEventType.BUDGET_ADDED,
            f"Budget added: {budget.category}",
            entity_type="budget",
            entity_id=budget.id,
            budget_amount=str(budget.budget_amount),
            period=budget.period.value,
        )
        return budget

    def update(self, budget: Union[Budget, Mapping[str, Any]]) -> bool:
        """Replace the budget with the same id."""
        record = Budget.model_validate(budget)
        index = self._index_of(record.id)
        if index is None:
            return False

        self._budgets[index] = record
        self._save()
        self._audit.record(
            AuditEventType.BUDGET_UPDATED,
            f"Budget updated: {record.category}",
            entity_type="budget",
            entity_id=record.id,
        )
        return True

    def delete(self, budget_id: str) -> bool:
        index = self._index_of(budget_id)
        if index is None:
            return False

        removed = self._budgets.pop(index)
        self._save()
        self._audit.record(
            AuditEventType.BUDGET_DELETED,
            f"Budget deleted: {removed.category}",
            entity_type="budget",
            entity_id=budget_id,
        )
        return True

    def accumulate_spent(
        self,
        category: str,
        delta: Union[Decimal, int, float, str],
        budget_id: Optional[str] = None,
    ) -> Optional[Budget]:
        """
        Add `delta` to a budget's spent amount (no clamping).

        With `budget_id`, that budget is targeted and must belong to
        `category`. Otherwise the first budget in `category` is used.

        Returns:
            The updated budget, or None if nothing matched
        """
        delta = to_money(delta)
        if budget_id is not None:
            index = self._index_of(budget_id)
            if index is not None and self._budgets[index].category != category:
                index = None
        else:
            matches = [i for i, b in enumerate(self._budgets) if b.category == category]
            index = matches[0] if matches else None
            if len(matches) > 1:
                self._logger.warning(
                    "budget_category_ambiguous",
                    category=category,
                    match_count=len(matches),
                    chosen_id=self._budgets[index].id,
                )

        if index is None:
            return None

        current = self._budgets[index]
        budget = current.model_copy(update={
            "spent_amount": current.spent_amount + delta,
        })
        self._budgets[index] = budget
        self._save()

        self._audit.record(
            AuditEventType.BUDGET_SPENT_ACCUMULATED,
            f"Spending recorded against {budget.category}",
            entity_type="budget",
            entity_id=budget.id,
            delta=str(delta),
            spent_amount=str(budget.spent_amount),
        )
        return budget

    def rollover_period(
        self,
        budget_id: str,
        today: Optional[date] = None,
    ) -> Optional[Budget]:
        """
        Start a fresh period for a budget: zero spending, start today,
        end one period later.
        """
        index = self._index_of(budget_id)
        if index is None:
            return None

        start = today or date.today()
        current = self._budgets[index]
        budget = current.model_copy(update={
            "spent_amount": ZERO,
            "start_date": start,
            "end_date": compute_period_end(current.period, start),
        })
        self._budgets[index] = budget
        self._save()

        self._audit.record(
            AuditEventType.BUDGET_PERIOD_ROLLED_OVER,
            f"Budget period reset: {budget.category}",
            entity_type="budget",
            entity_id=budget.id,
            start_date=budget.start_date.isoformat(),
            end_date=budget.end_date.isoformat(),
        )
        return budget

    def clear(self) -> None:
        self._budgets = []
        self._save()
        self._audit.record(
            AuditEventType.BUDGETS_CLEARED,
            "All budgets cleared",
            entity_type="budget",
        )

    # =========================================================================
    # SELECTORS
    # =========================================================================

    def get(self, budget_id: str) -> Optional[Budget]:
        index = self._index_of(budget_id)
        return self._budgets[index] if index is not None else None

    def by_category(self, category: str) -> list[Budget]:
        return [b for b in self._budgets if b.category == category]

    def over_budget(self) -> list[Budget]:
        return [b for b in self._budgets if b.is_over]

    def alerts(self) -> list[Budget]:
        """Budgets at or above their alert threshold."""
        return [b for b in self._budgets if b.is_alerting]

    def total_budget(self) -> Decimal:
        return sum((b.budget_amount for b in self._budgets), ZERO)

    def total_spent(self) -> Decimal:
        return sum((b.spent_amount for b in self._budgets), ZERO)
