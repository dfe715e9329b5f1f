"""Read-side derivations over the record store."""

from expense_tracker.queries.summary import summarize_by_category, summary_total

__all__ = ["summarize_by_category", "summary_total"]
