"""
Form Validation

DESIGN DECISION: Validation runs on the raw edit buffer, before any model
is built. Every problem is reported as a ValidationIssue so the form can
show all of them at once instead of failing on the first.

Checks for an expense:
- title, price, category and date are all filled in
- price is a positive number
- category is one of the Category enum values
- date is a calendar date (YYYY-MM-DD)
- price does not exceed the wallet balance at the moment of submission

Checks for income:
- amount is filled in and is a positive number

IMPORTANT: Validation NEVER silently fixes input. It reports issues and
the form stays open.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from expense_tracker.models.expense import (
    TITLE_MAX_LENGTH,
    Category,
    ExpenseRecord,
    ValidationIssue,
    ValidationResult,
)
from expense_tracker.models.forms import ExpenseDraft, IncomeDraft
from expense_tracker.services.wallet import InvalidAmountError, parse_amount


CATEGORY_VALUES = [category.value for category in Category]


def _parse_positive(raw: str) -> Optional[Decimal]:
    try:
        value = parse_amount(raw)
    except InvalidAmountError:
        return None
    return value if value > 0 else None


class FormValidator:
    """Validates the income and expense edit buffers."""

    def validate_income(self, draft: IncomeDraft) -> ValidationResult:
        issues = []

        if not draft.amount.strip():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Enter income amount",
            ))
        elif _parse_positive(draft.amount) is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Income amount must be a number greater than zero",
            ))

        return ValidationResult(form="income", issues=issues)

    def validate_expense(
        self,
        draft: ExpenseDraft,
        balance: Decimal,
    ) -> ValidationResult:
        """
        Validate an expense buffer against the current balance.

        The balance check uses the balance as it is right now, in edit mode
        as well as in create mode.
        """
        issues = []

        # Required fields
        for field in ("title", "price", "category", "date"):
            if not getattr(draft, field).strip():
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{field.capitalize()} is required",
                ))

        # Formats, only for fields that are present
        if len(draft.title.strip()) > TITLE_MAX_LENGTH:
            issues.append(ValidationIssue(
                field="title",
                issue_type="too_long",
                message=f"Title must be at most {TITLE_MAX_LENGTH} characters",
            ))

        price = None
        if draft.price.strip():
            price = _parse_positive(draft.price)
            if price is None:
                issues.append(ValidationIssue(
                    field="price",
                    issue_type="invalid_value",
                    message="Price must be a number greater than zero",
                ))

        if draft.category.strip() and draft.category.strip() not in CATEGORY_VALUES:
            issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Unknown category: {draft.category.strip()}",
                suggested_fix=f"Choose one of: {', '.join(CATEGORY_VALUES)}",
            ))

        if draft.date.strip():
            try:
                dt.date.fromisoformat(draft.date.strip())
            except ValueError:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=f"Not a valid date: {draft.date.strip()}",
                    suggested_fix="Use the YYYY-MM-DD format",
                ))

        if price is not None and price > balance:
            issues.append(ValidationIssue(
                field="price",
                issue_type="insufficient_balance",
                message="Insufficient balance",
            ))

        return ValidationResult(form="expense", issues=issues)

    def build_record(self, draft: ExpenseDraft) -> ExpenseRecord:
        """Turn a buffer that passed validate_expense into a record."""
        return ExpenseRecord(
            title=draft.title,
            price=parse_amount(draft.price),
            category=Category(draft.category.strip()),
            date=dt.date.fromisoformat(draft.date.strip()),
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        One message for the whole submission, shown in the open dialog.

        Missing fields collapse into a single "Please fill all fields" line.
        """
        if result.is_valid:
            return ""

        lines = []
        errors = [issue for issue in result.issues if issue.severity == "error"]
        missing = [issue for issue in errors if issue.issue_type == "missing"]

        if result.form == "expense" and missing:
            lines.append("Please fill all fields")
        else:
            lines.extend(issue.message for issue in missing)

        for issue in errors:
            if issue.issue_type == "missing":
                continue
            line = issue.message
            if issue.suggested_fix:
                line += f" ({issue.suggested_fix})"
            lines.append(line)

        return "\n".join(lines)
