"""
Form/Edit Controller

Owns the transient state of the two entry dialogs and is the only path
by which user input reaches AppState.

Each form is a (mode, buffer) pair:
- mode is Closed, Create or Edit(index); the income form never edits
- buffer is an immutable draft, replaced wholesale by every set_*_field

Submitting a valid form commits, closes the form and clears the buffer.
Submitting an invalid form changes nothing and returns the message to show.
Cancelling closes the form and drops the buffer.
If the change cannot be saved, nothing is applied and the form stays open
with its buffer, so submitting again applies it once.
"""

from typing import Optional, Union

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.models.forms import (
    Closed,
    Create,
    Edit,
    ExpenseDraft,
    IncomeDraft,
    SubmissionResult,
)
from expense_tracker.services.records import RecordNotFoundError
from expense_tracker.services.storage import StorageError
from expense_tracker.state import AppState
from expense_tracker.validation import FormValidator


SAVE_FAILED_MESSAGE = "Could not save changes, please try again"


class FormStateError(Exception):
    """A form command was issued while the form was closed."""
    pass


class FormController:
    """Drives the income and expense dialogs."""

    def __init__(
        self,
        state: AppState,
        validator: Optional[FormValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._state = state
        self._validator = validator or FormValidator()
        self._audit_logger = audit_logger

        self._income_mode: Union[Closed, Create] = Closed()
        self._income_draft = IncomeDraft()
        self._expense_mode: Union[Closed, Create, Edit] = Closed()
        self._expense_draft = ExpenseDraft()

    # -------------------------------------------------------------------------
    # Read-only view for the presentation layer
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def income_mode(self) -> Union[Closed, Create]:
        return self._income_mode

    @property
    def income_draft(self) -> IncomeDraft:
        return self._income_draft

    @property
    def expense_mode(self) -> Union[Closed, Create, Edit]:
        return self._expense_mode

    @property
    def expense_draft(self) -> ExpenseDraft:
        return self._expense_draft

    @property
    def is_income_open(self) -> bool:
        return not isinstance(self._income_mode, Closed)

    @property
    def is_expense_open(self) -> bool:
        return not isinstance(self._expense_mode, Closed)

    @property
    def expense_dialog_title(self) -> str:
        return "Edit Expense" if isinstance(self._expense_mode, Edit) else "Add Expense"

    def _rejected(self, form: str, result) -> SubmissionResult:
        if self._audit_logger:
            self._audit_logger.log_submission_rejected(
                form=form,
                issues=[issue.model_dump() for issue in result.issues],
            )
        return SubmissionResult(
            accepted=False,
            message=self._validator.get_user_friendly_summary(result),
        )

    # -------------------------------------------------------------------------
    # Income form
    # -------------------------------------------------------------------------

    def open_income(self) -> None:
        self._income_mode = Create()
        self._income_draft = IncomeDraft()

    def set_income_field(self, name: str, value: str) -> None:
        if not self.is_income_open:
            raise FormStateError("Income form is not open")
        self._income_draft = self._income_draft.with_field(name, value)

    def cancel_income(self) -> None:
        self._income_mode = Closed()
        self._income_draft = IncomeDraft()

    def submit_income(self) -> SubmissionResult:
        if not self.is_income_open:
            raise FormStateError("Income form is not open")

        result = self._validator.validate_income(self._income_draft)
        if not result.is_valid:
            return self._rejected("income", result)

        try:
            self._state.add_income(self._income_draft.amount)
        except StorageError:
            return SubmissionResult(accepted=False, message=SAVE_FAILED_MESSAGE)
        self.cancel_income()
        return SubmissionResult(accepted=True, message="Income added")

    # -------------------------------------------------------------------------
    # Expense form
    # -------------------------------------------------------------------------

    def open_expense_create(self) -> None:
        self._expense_mode = Create()
        self._expense_draft = ExpenseDraft()

    def open_expense_edit(self, index: int) -> None:
        """
        Open the expense form on the record at ``index``.

        Raises:
            RecordNotFoundError: If there is no record at ``index``
        """
        record = self._state.record_store.get(index)
        self._expense_mode = Edit(index=index)
        self._expense_draft = ExpenseDraft.from_record(record)

    def set_expense_field(self, name: str, value: str) -> None:
        if not self.is_expense_open:
            raise FormStateError("Expense form is not open")
        self._expense_draft = self._expense_draft.with_field(name, value)

    def cancel_expense(self) -> None:
        self._expense_mode = Closed()
        self._expense_draft = ExpenseDraft()

    def submit_expense(self) -> SubmissionResult:
        if not self.is_expense_open:
            raise FormStateError("Expense form is not open")

        result = self._validator.validate_expense(
            self._expense_draft,
            balance=self._state.balance,
        )
        if not result.is_valid:
            return self._rejected("expense", result)

        record = self._validator.build_record(self._expense_draft)
        mode = self._expense_mode

        if isinstance(mode, Edit):
            try:
                self._state.replace_expense(mode.index, record)
            except RecordNotFoundError:
                self.cancel_expense()
                return SubmissionResult(
                    accepted=False,
                    message="That expense no longer exists",
                )
            except StorageError:
                return SubmissionResult(accepted=False, message=SAVE_FAILED_MESSAGE)
            message = "Expense updated"
        else:
            try:
                self._state.add_expense(record)
            except StorageError:
                return SubmissionResult(accepted=False, message=SAVE_FAILED_MESSAGE)
            message = "Expense added"

        self.cancel_expense()
        return SubmissionResult(accepted=True, message=message)

    # -------------------------------------------------------------------------
    # Row actions
    # -------------------------------------------------------------------------

    def delete_expense(self, index: int) -> ExpenseRecord:
        """
        Delete the record at ``index`` and refund its price.

        An open edit of that record is abandoned; an open edit of a later
        record follows it to its new position.

        Raises:
            RecordNotFoundError: If there is no record at ``index``
            StorageError: If the deletion could not be saved (nothing changes)
        """
        removed = self._state.delete_expense(index)

        mode = self._expense_mode
        if isinstance(mode, Edit):
            if mode.index == index:
                self.cancel_expense()
            elif mode.index > index:
                self._expense_mode = Edit(index=mode.index - 1)

        return removed
