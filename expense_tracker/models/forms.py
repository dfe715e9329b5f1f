"""
Form State Models

The entry forms are modelled as immutable edit buffers plus an explicit mode.

DESIGN DECISION: A buffer is never mutated in place. Every "set field"
command produces a new buffer that replaces the old one wholesale, so a
cancelled form can simply be dropped.

DESIGN DECISION: Create and edit are distinct variants of a tagged union.
An edit index only exists inside the Edit variant, so "creating with an
index" or "editing without one" cannot be represented.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.expense import ExpenseRecord


# =============================================================================
# EDIT BUFFERS
# =============================================================================

class _Draft(BaseModel):
    """Base for edit buffers holding raw field text."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    def with_field(self, name: str, value: str):
        """Return a copy of this buffer with one field replaced."""
        if name not in type(self).model_fields:
            raise ValueError(f"Unknown field for {type(self).__name__}: {name}")
        return self.model_copy(update={name: "" if value is None else str(value)})


class IncomeDraft(_Draft):
    """Raw contents of the income form."""

    amount: str = ""


class ExpenseDraft(_Draft):
    """Raw contents of the expense form."""

    title: str = ""
    price: str = ""
    category: str = ""
    date: str = ""

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseDraft":
        """Pre-populate a buffer from a stored record (edit mode)."""
        return cls(
            title=record.title,
            price=str(record.price),
            category=record.category.value,
            date=record.date.isoformat(),
        )


# =============================================================================
# FORM MODES
# =============================================================================

class Closed(BaseModel):
    """The dialog is not shown."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["closed"] = "closed"


class Create(BaseModel):
    """The dialog is open to enter a new entry."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["create"] = "create"


class Edit(BaseModel):
    """The dialog is open to change the record at ``index``."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["edit"] = "edit"
    index: int = Field(..., ge=0)


FormMode = Annotated[Union[Closed, Create, Edit], Field(discriminator="kind")]


# =============================================================================
# SUBMISSION OUTCOME
# =============================================================================

class SubmissionResult(BaseModel):
    """What the UI needs to know after a form submit."""
    model_config = ConfigDict(frozen=True)

    accepted: bool
    message: str = ""
