"""Budget summary package."""

from budgetbuddy.summary.builder import (
    CATEGORY_OVER_BUDGET_WARNING,
    CATEGORY_WARNING_CSS_CLASS,
    OVER_BUDGET_WARNING,
    OVER_INCOME_WARNING,
    WARNING_CSS_CLASS,
    SummaryBuilder,
    format_currency,
    warning_markup,
)

__all__ = [
    "CATEGORY_OVER_BUDGET_WARNING",
    "CATEGORY_WARNING_CSS_CLASS",
    "OVER_BUDGET_WARNING",
    "OVER_INCOME_WARNING",
    "WARNING_CSS_CLASS",
    "SummaryBuilder",
    "format_currency",
    "warning_markup",
]
