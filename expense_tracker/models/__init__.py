"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
"""

from expense_tracker.models.expense import (
    Category,
    CategoryTotal,
    ExpenseRecord,
    ValidationIssue,
    ValidationResult,
)
from expense_tracker.models.forms import (
    Closed,
    Create,
    Edit,
    ExpenseDraft,
    FormMode,
    IncomeDraft,
    SubmissionResult,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Category",
    "CategoryTotal",
    "ExpenseRecord",
    "ValidationIssue",
    "ValidationResult",
    # Form models
    "Closed",
    "Create",
    "Edit",
    "ExpenseDraft",
    "FormMode",
    "IncomeDraft",
    "SubmissionResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
