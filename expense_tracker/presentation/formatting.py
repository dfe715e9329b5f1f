"""Text formatting for the page."""

import re
from decimal import Decimal

from expense_tracker.models.expense import ExpenseRecord


_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()<>#+\-!|~$])")


def escape_markdown(text: str) -> str:
    """Backslash-escape characters Streamlit markdown would interpret."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_money(amount: Decimal, symbol: str = "$") -> str:
    """Amount with currency symbol, two decimal places, no grouping."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):.2f}"


def format_record_line(record: ExpenseRecord, symbol: str = "$") -> str:
    # Markdown, one transaction row; only the title is user text
    return (
        f"**{escape_markdown(record.title)}** - "
        f"{format_money(record.price, symbol)} "
        f"({record.category.value}) on {record.date.isoformat()}"
    )
