"""Presentation helpers: charts and text formatting."""

from expense_tracker.presentation.charts import (
    CATEGORY_COLORS,
    category_totals_chart,
    distribution_chart,
    summary_frame,
)
from expense_tracker.presentation.formatting import (
    escape_markdown,
    format_money,
    format_record_line,
)

__all__ = [
    "CATEGORY_COLORS",
    "category_totals_chart",
    "distribution_chart",
    "escape_markdown",
    "format_money",
    "format_record_line",
    "summary_frame",
]
