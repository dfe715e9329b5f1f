"""
Application Wiring for Expense Tracker

Ties configuration, storage, state and the form controller together.

DESIGN DECISION: The presentation layer receives one FormController and
reads everything (balance, records, summary, dialog state) through it.
Nothing else holds application state.
"""

from typing import Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings, get_settings
from expense_tracker.controller import FormController
from expense_tracker.services.storage import KeyValueStoreInterface
from expense_tracker.state import StatePersister
from expense_tracker.validation import FormValidator


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStoreInterface] = None,
) -> tuple[FormController, StatePersister, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration; defaults to get_settings().
        store: Key-value backend; defaults to the configured JSON file.

    Returns:
        (form_controller, state_persister, audit_logger)
    """
    settings = settings or get_settings()
    audit_logger = AuditLogger()

    persister = StatePersister.from_settings(
        settings,
        store=store,
        audit_logger=audit_logger,
    )
    state = persister.load()

    controller = FormController(
        state=state,
        validator=FormValidator(),
        audit_logger=audit_logger,
    )

    return controller, persister, audit_logger
