"""
Audit Logger

DESIGN DECISION: Every change to the wallet or record store is logged.
This provides:
1. Traceability of the balance
2. Debugging capability when persisted state is discarded
3. A trail of rejected submissions

The audit logger writes to the structured local log and keeps a short
in-memory history. Audit events are not persisted.
"""

import logging
from decimal import Decimal

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at ``level``."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Keeps the events of the current process in memory as well, so the UI
    and tests can inspect what happened.
    """

    def __init__(self, keep_history: int = 200):
        """
        Args:
            keep_history: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("expense_tracker.audit")
        self._keep_history = keep_history
        self._history: list[AuditEvent] = []

    @property
    def history(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)
        if len(self._history) > self._keep_history:
            del self._history[: len(self._history) - self._keep_history]

    def log_income_added(self, amount: Decimal, balance: Decimal) -> None:
        self.log(AuditEventBuilder.income_added(amount=amount, balance=balance))

    def log_expense_added(
        self,
        index: int,
        title: str,
        price: Decimal,
        balance: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.expense_added(
            index=index,
            title=title,
            price=price,
            balance=balance,
        ))

    def log_expense_updated(
        self,
        index: int,
        old_price: Decimal,
        new_price: Decimal,
        balance: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.expense_updated(
            index=index,
            old_price=old_price,
            new_price=new_price,
            balance=balance,
        ))

    def log_expense_deleted(
        self,
        index: int,
        title: str,
        price: Decimal,
        balance: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.expense_deleted(
            index=index,
            title=title,
            price=price,
            balance=balance,
        ))

    def log_submission_rejected(self, form: str, issues: list[dict]) -> None:
        """Log a form submission that failed validation."""
        self.log(AuditEventBuilder.submission_rejected(form=form, issues=issues))

    def log_state_restored(self, balance: Decimal, record_count: int) -> None:
        self.log(AuditEventBuilder.state_restored(
            balance=balance,
            record_count=record_count,
        ))

    def log_state_defaulted(self, key: str, reason: str) -> None:
        """Log a persisted slot that was malformed and replaced by its default."""
        self.log(AuditEventBuilder.state_defaulted(key=key, reason=reason))

    def log_save_failed(self, operation: str, error: str) -> None:
        """Log a mutation that was undone because the store write failed."""
        self.log(AuditEventBuilder.save_failed(operation=operation, error=error))
