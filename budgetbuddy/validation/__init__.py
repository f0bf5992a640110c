"""Input validation package."""

from budgetbuddy.validation.validator import BudgetInputValidator

__all__ = ["BudgetInputValidator"]
