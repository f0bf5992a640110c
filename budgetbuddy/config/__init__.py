"""Configuration package."""

from budgetbuddy.config.settings import (
    BudgetSettings,
    NegativeInputPolicy,
    get_settings,
)

__all__ = [
    "BudgetSettings",
    "NegativeInputPolicy",
    "get_settings",
]
