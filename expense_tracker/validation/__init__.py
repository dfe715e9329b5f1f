"""Form validation package."""

from expense_tracker.validation.validator import CATEGORY_VALUES, FormValidator

__all__ = ["CATEGORY_VALUES", "FormValidator"]
