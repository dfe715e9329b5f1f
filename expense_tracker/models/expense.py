"""
Core Data Models for Expense Tracker

These models define the schemas for everything the tracker stores or derives.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the persisted JSON layout

DESIGN DECISION: Money is held as Decimal in memory and written as its exact
decimal string, matching the wallet slot. A reload gives back the same
amounts, with no float rounding and no overflow to null.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


TITLE_MAX_LENGTH = 200


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: The declaration order is the display order of the
    category summary. Adding a category means adding it here; the form
    selector and the aggregator both read this enum.
    """
    FOOD = "Food"
    TRAVEL = "Travel"
    ENTERTAINMENT = "Entertainment"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    One stored expense transaction.

    Records are only created from a validated expense form, so every
    stored record has all four fields populated.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Free-text label"
    )
    price: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent, in the wallet's currency unit"
    )
    category: Category = Field(
        ...,
        description="Expense category"
    )
    date: dt.date = Field(
        ...,
        description="Date of the transaction"
    )


class CategoryTotal(BaseModel):
    """One row of the per-category spending summary."""
    model_config = ConfigDict(frozen=True)

    category: Category
    total: Decimal = Field(
        ...,
        description="Sum of the prices of all records in this category"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'insufficient_balance')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating one form submission."""

    form: str = Field(
        ...,
        pattern="^(income|expense)$",
        description="Which form was validated"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        """A submission is valid when it has no error-level issues."""
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
