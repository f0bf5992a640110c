"""Budget consistency engine package."""

from budgetbuddy.engine.budget_model import BudgetModel
from budgetbuddy.engine.errors import (
    BudgetError,
    BudgetValidationError,
    ValidationErrorKind,
)

__all__ = [
    "BudgetError",
    "BudgetModel",
    "BudgetValidationError",
    "ValidationErrorKind",
]
