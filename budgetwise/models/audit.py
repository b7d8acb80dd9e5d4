"""
Audit Models for BudgetWise

Every mutation of application state is recorded as an audit event.
This provides:
1. Traceability of what changed and when
2. Debugging information when persisted data looks wrong
3. A single place to see storage failures that were swallowed

DESIGN DECISION: Audit events are emitted to the structured log only.
They are not persisted alongside the user's data.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from budgetwise.models.base import utc_now


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    One event type per store operation.
    """
    # Ledger
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_REPLACED = "transactions_replaced"
    TRANSACTIONS_CLEARED = "transactions_cleared"

    # Budgets
    BUDGET_ADDED = "budget_added"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"
    BUDGET_SPENT_ACCUMULATED = "budget_spent_accumulated"
    BUDGET_PERIOD_ROLLED_OVER = "budget_period_rolled_over"
    BUDGETS_CLEARED = "budgets_cleared"

    # Settings
    SETTINGS_UPDATED = "settings_updated"
    SETTINGS_RESET = "settings_reset"

    # Analytics
    INSIGHT_ADDED = "insight_added"
    INSIGHT_DISMISSED = "insight_dismissed"
    INSIGHTS_PURGED = "insights_purged"
    SPENDING_PATTERNS_UPDATED = "spending_patterns_updated"
    PREDICTIONS_UPDATED = "predictions_updated"
    REPORT_GENERATED = "report_generated"
    ANALYTICS_CLEARED = "analytics_cleared"

    # Storage
    BACKUP_CREATED = "backup_created"
    BACKUP_RESTORED = "backup_restored"
    BACKUP_REJECTED = "backup_rejected"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    STORAGE_CLEARED = "storage_cleared"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every state mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'settings')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
        }
