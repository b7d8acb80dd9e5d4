"""
Transaction Ledger

Ordered collection of transactions, newest first by convention.
Persisted as a whole under the `transactions` key after every mutation.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from budgetwise.audit import AuditLogger
from budgetwise.models.audit import AuditEventType
from budgetwise.models.base import ZERO
from budgetwise.models.transaction import Transaction, TransactionDraft, TransactionType
from budgetwise.services.storage import WriteQueue
from budgetwise.state.base import PersistentSlice, dump_all

STORAGE_KEY = "transactions"


class TransactionLedger(PersistentSlice):
    """
    The user's transactions.

    Unknown ids are silent no-ops for update() and delete(): they return
    False and schedule no write.
    """

    def __init__(
        self,
        writer: Optional[WriteQueue] = None,
        audit_logger: Optional[AuditLogger] = None,
        recent_limit: int = 5,
    ):
        super().__init__(writer, audit_logger)
        self._transactions: list[Transaction] = []
        self._recent_limit = recent_limit

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def _save(self) -> None:
        self._persist(STORAGE_KEY, dump_all(self._transactions))

    def hydrate(self, raw: Any) -> None:
        """Replace memory with a decoded stored value. Does not persist."""
        records = self._validate_records(Transaction, raw, STORAGE_KEY)
        if records is not None:
            self._transactions = records

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def add(self, draft: Union[TransactionDraft, Mapping[str, Any]]) -> Transaction:
        """Record a new transaction at the front of the ledger."""
        transaction = Transaction.from_draft(TransactionDraft.model_validate(draft))
        existing = {t.id for t in self._transactions}
        while transaction.id in existing:
            transaction = Transaction.from_draft(transaction)

        self._transactions.insert(0, transaction)
        self._save()

        self._audit.record(
            AuditEventType.TRANSACTION_ADDED,
            f"Transaction added: {transaction.description}",
            entity_type="transaction",
            entity_id=transaction.id,
            amount=str(transaction.amount),
            type=transaction.type.value,
            category=transaction.category,
        )
        return transaction

    def update(self, transaction: Union[Transaction, Mapping[str, Any]]) -> bool:
        """Replace the transaction with the same id."""
        record = Transaction.model_validate(transaction)
        for index, current in enumerate(self._transactions):
            if current.id == record.id:
                self._transactions[index] = record
                self._save()
                self._audit.record(
                    AuditEventType.TRANSACTION_UPDATED,
                    f"Transaction updated: {record.description}",
                    entity_type="transaction",
                    entity_id=record.id,
                )
                return True
        return False

    def delete(self, transaction_id: str) -> bool:
        remaining = [t for t in self._transactions if t.id != transaction_id]
        if len(remaining) == len(self._transactions):
            return False

        self._transactions = remaining
        self._save()
        self._audit.record(
            AuditEventType.TRANSACTION_DELETED,
            "Transaction deleted",
            entity_type="transaction",
            entity_id=transaction_id,
        )
        return True

    def replace_all(self, records: Iterable[Union[Transaction, Mapping[str, Any]]]) -> None:
        """Replace the whole ledger (e.g. after an import)."""
        self._transactions = [Transaction.model_validate(r) for r in records]
        self._save()
        self._audit.record(
            AuditEventType.TRANSACTIONS_REPLACED,
            "Ledger replaced",
            entity_type="transaction",
            count=len(self._transactions),
        )

    def clear(self) -> None:
        self._transactions = []
        self._save()
        self._audit.record(
            AuditEventType.TRANSACTIONS_CLEARED,
            "Ledger cleared",
            entity_type="transaction",
        )

    # =========================================================================
    # SELECTORS
    # =========================================================================

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def by_type(self, transaction_type: TransactionType) -> list[Transaction]:
        transaction_type = TransactionType(transaction_type)
        return [t for t in self._transactions if t.type == transaction_type]

    def by_category(self, category: str) -> list[Transaction]:
        return [t for t in self._transactions if t.category == category]

    def recent(self, limit: Optional[int] = None) -> list[Transaction]:
        """The first `limit` entries (newest first by convention)."""
        if limit is None:
            limit = self._recent_limit
        return self._transactions[:limit]

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        return list(dict.fromkeys(t.category for t in self._transactions))

    def search(
        self,
        text: Optional[str] = None,
        category: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """
        Filter the ledger.

        `text` matches description or category, case-insensitively.
        Omitted filters match everything.
        """
        needle = text.lower() if text else None
        result = []
        for transaction in self._transactions:
            if needle and needle not in transaction.description.lower() \
                    and needle not in transaction.category.lower():
                continue
            if category and transaction.category != category:
                continue
            if transaction_type and transaction.type != TransactionType(transaction_type):
                continue
            result.append(transaction)
        return result

    def total_income(self) -> Decimal:
        return sum(
            (t.amount for t in self._transactions if t.type == TransactionType.INCOME),
            ZERO,
        )

    def total_expenses(self) -> Decimal:
        return sum(
            (t.amount for t in self._transactions if t.type == TransactionType.EXPENSE),
            ZERO,
        )

    def net_amount(self) -> Decimal:
        return self.total_income() - self.total_expenses()
