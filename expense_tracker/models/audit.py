"""
Audit Models for Expense Tracker

Every change to the wallet or the record store is logged as an audit event.
This provides:
1. Traceability of how the balance got to its current value
2. Debugging information when persisted state had to be discarded
3. A record of rejected submissions

DESIGN DECISION: Audit events are only ever emitted, never edited.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Wallet
    INCOME_ADDED = "income_added"

    # Record store
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Forms
    SUBMISSION_REJECTED = "submission_rejected"

    # Persistence
    STATE_RESTORED = "state_restored"
    STATE_DEFAULTED = "state_defaulted"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """How loudly an event is logged."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    One wallet, record or persistence change, or a rejected form.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Event id"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Creation time, UTC"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="What kind of change this was"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Log level the event is emitted at"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'wallet', 'state')"
    )
    entity_index: Optional[int] = Field(
        default=None,
        description="Position of the record this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary for the log"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Event-specific values such as amounts and titles"
    )

    is_user_action: bool = Field(
        default=False,
        description="True when a form or button caused it"
    )

    def to_log_dict(self) -> dict:
        """
        Flatten into keyword arguments for a structlog call.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_index": self.entity_index,
            "description": self.description,
            "details": self.details,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Factory methods, one per event the app emits.

    Usage:
        event = AuditEventBuilder.income_added(amount, balance)
        event = AuditEventBuilder.expense_deleted(index, title, price, balance)
    """

    @staticmethod
    def income_added(amount: Decimal, balance: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INCOME_ADDED,
            entity_type="wallet",
            description=f"Income added: {amount}",
            details={
                "amount": str(amount),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_added(
        index: int,
        title: str,
        price: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_index=index,
            description=f"Expense added: {title} - {price}",
            details={
                "title": title,
                "price": str(price),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        index: int,
        old_price: Decimal,
        new_price: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_index=index,
            description=f"Expense #{index} updated: {old_price} -> {new_price}",
            details={
                "old_price": str(old_price),
                "new_price": str(new_price),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        index: int,
        title: str,
        price: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_index=index,
            description=f"Expense deleted: {title} - {price} refunded",
            details={
                "title": title,
                "price": str(price),
                "balance": str(balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def submission_rejected(form: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBMISSION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=form,
            description=f"{form.capitalize()} form rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def state_restored(balance: Decimal, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_RESTORED,
            entity_type="state",
            description=f"State restored with {record_count} records",
            details={
                "balance": str(balance),
                "record_count": record_count,
            },
        )

    @staticmethod
    def state_defaulted(key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_DEFAULTED,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            description=f"Persisted value for '{key}' replaced with default",
            details={
                "key": key,
                "reason": reason,
            },
        )

    @staticmethod
    def save_failed(operation: str, error: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            description=f"Could not save after {operation}; change rolled back",
            details={
                "operation": operation,
                "error": error,
            },
        )
