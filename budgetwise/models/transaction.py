"""
Transaction Models

DESIGN DECISION: `amount` is always the unsigned magnitude and `type`
is authoritative. The sign is derived only when aggregating
(see Transaction.signed_amount). Legacy records that stored expenses as
negative numbers are normalised to their magnitude when loaded.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from budgetwise.models.base import Money, RecordModel, new_id


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionDraft(RecordModel):
    """
    A transaction as entered by the user, before it gets an id.
    """

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the money was for"
    )
    amount: Money = Field(
        ...,
        ge=0,
        description="Unsigned amount"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category tag"
    )
    transaction_date: date = Field(
        ...,
        alias="date",
        description="Date the transaction happened"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="User notes"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def normalize_signed_amount(cls, v):
        """Older records stored expenses as negative numbers."""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool) and v < 0:
            return -v
        return v

    @property
    def signed_amount(self) -> Decimal:
        """Negative for expenses, positive for income."""
        if self.type == TransactionType.EXPENSE:
            return -self.amount
        return self.amount

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class Transaction(TransactionDraft):
    """A ledger entry."""

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique transaction ID"
    )

    @classmethod
    def from_draft(cls, draft: TransactionDraft) -> "Transaction":
        """Create a ledger entry with a fresh id."""
        data = draft.model_dump(include=set(TransactionDraft.model_fields))
        return cls(**data, id=new_id())
