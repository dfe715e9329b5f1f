"""
Category Summary

DESIGN DECISION: The summary is a pure derivation of the record list.
It is recomputed on every render; personal-use volumes make caching or
incremental maintenance unnecessary.

Output order follows the Category enum, not insertion order and not value.
"""

from decimal import Decimal
from typing import Iterable

from expense_tracker.models.expense import Category, CategoryTotal, ExpenseRecord


def summarize_by_category(records: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    """
    Group records by category and sum their prices.

    Categories whose total is zero are left out.
    """
    totals: dict[Category, Decimal] = {category: Decimal("0") for category in Category}
    for record in records:
        totals[record.category] += record.price

    return [
        CategoryTotal(category=category, total=totals[category])
        for category in Category
        if totals[category] != 0
    ]


def summary_total(summary: Iterable[CategoryTotal]) -> Decimal:
    """Sum across all categories of a summary."""
    return sum((row.total for row in summary), Decimal("0"))
