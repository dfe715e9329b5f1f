"""
Streamlit Frontend for Expense Tracker

The single page the user works with: wallet balance, income and expense
dialogs, spending charts and the transaction list.

DESIGN PRINCIPLES:
1. Everything shown is read from the FormController on each run
2. Every change goes through a controller command
3. Rejected input keeps the dialog open with the reason shown
4. The page holds no state of its own beyond the controller

Run with:  streamlit run app/main.py
"""

import datetime as dt

import streamlit as st

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.controller import SAVE_FAILED_MESSAGE, FormController
from expense_tracker.orchestrator import create_app_components
from expense_tracker.presentation import (
    category_totals_chart,
    distribution_chart,
    escape_markdown,
    format_money,
    format_record_line,
)
from expense_tracker.services.storage import StorageError
from expense_tracker.validation import CATEGORY_VALUES


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
)

st.markdown("""
<style>
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def get_components() -> tuple[FormController, AuditLogger]:
    """Create the application components once per browser session."""
    if "controller" not in st.session_state:
        configure_logging(get_settings().app.log_level)
        controller, _, audit_logger = create_app_components()
        st.session_state.controller = controller
        st.session_state.audit_logger = audit_logger
    return st.session_state.controller, st.session_state.audit_logger


# =============================================================================
# BUTTON CALLBACKS
# =============================================================================
# Callbacks run before the rerun they trigger. "dialog_requested" tells that
# rerun which dialog was opened by the click.

def _open_income(controller: FormController):
    controller.open_income()
    st.session_state.dialog_requested = "income"


def _open_expense(controller: FormController):
    controller.open_expense_create()
    st.session_state.dialog_requested = "expense"


def _open_edit(controller: FormController, index: int):
    controller.open_expense_edit(index)
    st.session_state.dialog_requested = "expense"


def _delete(controller: FormController, index: int):
    try:
        removed = controller.delete_expense(index)
    except StorageError:
        st.session_state.flash = SAVE_FAILED_MESSAGE
        return
    st.session_state.flash = f"Deleted {escape_markdown(removed.title)}"


# =============================================================================
# DIALOGS
# =============================================================================

@st.dialog("Add Income")
def income_dialog(controller: FormController):
    with st.form("income_form"):
        amount = st.number_input(
            "Income Amount",
            value=None,
            min_value=0.0,
            step=0.01,
            format="%.2f",
            placeholder="Income Amount",
        )
        submitted = st.form_submit_button("Add Balance", type="primary")

    if submitted:
        controller.set_income_field("amount", "" if amount is None else str(amount))
        result = controller.submit_income()
        if result.accepted:
            st.session_state.flash = result.message
            st.rerun()
        else:
            st.error(result.message)

    if st.button("Cancel", key="income_cancel"):
        controller.cancel_income()
        st.rerun()


def _render_expense_form(controller: FormController):
    draft = controller.expense_draft
    options = [""] + CATEGORY_VALUES

    with st.form("expense_form"):
        title = st.text_input("Title", value=draft.title, placeholder="Title")
        price = st.number_input(
            "Amount",
            value=float(draft.price) if draft.price else None,
            min_value=0.0,
            step=0.01,
            format="%.2f",
            placeholder="Amount",
        )
        category = st.selectbox(
            "Category",
            options=options,
            index=options.index(draft.category) if draft.category in options else 0,
            format_func=lambda value: value or "Select Category",
        )
        when = st.date_input(
            "Date",
            value=dt.date.fromisoformat(draft.date) if draft.date else None,
        )
        submitted = st.form_submit_button(controller.expense_dialog_title, type="primary")

    if submitted:
        controller.set_expense_field("title", title)
        controller.set_expense_field("price", "" if price is None else str(price))
        controller.set_expense_field("category", category)
        controller.set_expense_field("date", when.isoformat() if when else "")
        result = controller.submit_expense()
        if result.accepted:
            st.session_state.flash = result.message
            st.rerun()
        else:
            st.error(result.message)

    if st.button("Cancel", key="expense_cancel"):
        controller.cancel_expense()
        st.rerun()


@st.dialog("Add Expense")
def add_expense_dialog(controller: FormController):
    _render_expense_form(controller)


@st.dialog("Edit Expense")
def edit_expense_dialog(controller: FormController):
    _render_expense_form(controller)


# =============================================================================
# PAGE SECTIONS
# =============================================================================

def render_wallet(controller: FormController, symbol: str):
    st.markdown("### Wallet Balance")
    st.markdown(
        f'<div class="big-number">{format_money(controller.state.balance, symbol)}</div>',
        unsafe_allow_html=True,
    )

    col1, col2, _ = st.columns([1, 1, 3])
    with col1:
        st.button("+ Add Income", on_click=_open_income, args=(controller,))
    with col2:
        st.button("+ Add Expense", on_click=_open_expense, args=(controller,))


def render_charts(controller: FormController):
    summary = controller.state.summary()
    if not summary:
        st.info("No expenses yet. Add one to see where your money goes.")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(distribution_chart(summary), use_container_width=True)
    with col2:
        st.plotly_chart(category_totals_chart(summary), use_container_width=True)


def render_transactions(controller: FormController, symbol: str):
    st.markdown("## Expenses")
    st.markdown("### Transactions")

    records = controller.state.records
    if not records:
        st.caption("No transactions recorded.")
        return

    for index, record in enumerate(records):
        col1, col2, col3 = st.columns([8, 1, 1])
        with col1:
            st.markdown(format_record_line(record, symbol))
        with col2:
            st.button(
                "✏️",
                key=f"edit_{index}",
                help="Edit",
                on_click=_open_edit,
                args=(controller, index),
            )
        with col3:
            st.button(
                "🗑️",
                key=f"delete_{index}",
                help="Delete",
                on_click=_delete,
                args=(controller, index),
            )


def render_sidebar(audit_logger: AuditLogger):
    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    settings = get_settings()
    with st.sidebar.expander("⚙️ Settings"):
        status = validate_all_settings()
        for name in ("storage", "app"):
            if status.get(name, False):
                st.success(f"✅ {name.capitalize()} settings OK")
            else:
                st.error(f"❌ {name.capitalize()}: {status.get(f'{name}_error')}")
        if status.get("storage"):
            st.caption(f"Data file: `{settings.storage.data_file}`")

    with st.sidebar.expander("📋 Recent activity"):
        events = audit_logger.history[-10:]
        if not events:
            st.caption("Nothing yet.")
        for event in reversed(events):
            st.markdown(f"- {escape_markdown(event.description)}")


def main():
    """Main application entry point."""
    controller, audit_logger = get_components()
    symbol = get_settings().app.currency_symbol

    requested = st.session_state.pop("dialog_requested", None)

    # A dialog closed with its X button leaves its form open without a
    # submit or cancel. Any full rerun not caused by opening it means that.
    if controller.is_income_open and requested != "income":
        controller.cancel_income()
    if controller.is_expense_open and requested != "expense":
        controller.cancel_expense()

    flash = st.session_state.pop("flash", None)
    if flash:
        st.toast(flash)

    render_sidebar(audit_logger)

    st.title("Expense Tracker")
    render_wallet(controller, symbol)
    st.markdown("---")
    render_charts(controller)
    st.markdown("---")
    render_transactions(controller, symbol)

    if requested == "income":
        income_dialog(controller)
    elif requested == "expense":
        if controller.expense_dialog_title == "Edit Expense":
            edit_expense_dialog(controller)
        else:
            add_expense_dialog(controller)


if __name__ == "__main__":
    main()
