"""
Budget Summary

DESIGN DECISION: The UI never computes totals or warnings itself.
It asks SummaryBuilder for a BudgetSummary snapshot and renders it.
The snapshot is read-only and is never fed back into the model.

Amounts are displayed as truncated integers (toward zero), never
rounded: 666.67 is shown as 666.
"""

import html
from typing import Optional

from budgetbuddy.config import BudgetSettings, get_settings
from budgetbuddy.engine import BudgetModel
from budgetbuddy.models.budget import BudgetSummary, CategoryStatus, FixedCategory


OVER_INCOME_WARNING = "⚠️ Total budget exceeds income!"
OVER_BUDGET_WARNING = "⚠️ You are over total budget!"
CATEGORY_OVER_BUDGET_WARNING = "⚠️ {category} category over budget!"


WARNING_CSS_CLASS = "warning-line"
CATEGORY_WARNING_CSS_CLASS = "category-warning-line"


def format_currency(amount: float, symbol: Optional[str] = None) -> str:
    """Format an amount as e.g. '₹1234' (truncated, not rounded)."""
    if symbol is None:
        symbol = get_settings().currency_symbol
    return f"{symbol}{int(amount)}"


def warning_markup(warnings: list[str]) -> list[str]:
    """
    HTML paragraphs for warning lines.

    Category warnings carry user-typed names, so every line is escaped.
    """
    totals = (OVER_INCOME_WARNING, OVER_BUDGET_WARNING)
    return [
        '<p class="{}">{}</p>'.format(
            WARNING_CSS_CLASS if line in totals else CATEGORY_WARNING_CSS_CLASS,
            html.escape(line),
        )
        for line in warnings
    ]


class SummaryBuilder:
    """
    Builds BudgetSummary snapshots from a BudgetModel.

    GUARANTEES:
    - Only reports values the model derives; never adjusts them
    - Warning lines come out in a stable display order
    """

    def __init__(
        self,
        model: BudgetModel,
        settings: Optional[BudgetSettings] = None,
    ):
        self._model = model
        self._settings = settings or model.settings

    def category_statuses(self) -> list[CategoryStatus]:
        """Status of every category, fixed first, custom in insertion order."""
        fixed_names = set(FixedCategory.names())
        return [
            CategoryStatus(
                name=name,
                budget=self._model.category_budget(name),
                spent=self._model.total_spent(name),
                is_fixed=name in fixed_names,
                is_over_budget=self._model.is_over_budget_for_category(name),
            )
            for name in self._model.category_names()
        ]

    def warnings(self) -> list[str]:
        lines = []
        if self._model.over_income_limit:
            lines.append(OVER_INCOME_WARNING)
        if self._model.is_over_budget:
            lines.append(OVER_BUDGET_WARNING)
        for category in self._model.categories_over_budget():
            lines.append(CATEGORY_OVER_BUDGET_WARNING.format(category=category))
        return lines

    def build(self) -> BudgetSummary:
        model = self._model
        return BudgetSummary(
            income=model.income,
            total_budget=model.total_budget,
            total_expense=model.total_expense,
            goals_reserved=model.goals_reserved,
            available_budget=model.available_budget,
            over_income_limit=model.over_income_limit,
            is_over_budget=model.is_over_budget,
            categories=self.category_statuses(),
            warnings=self.warnings(),
        )

    def total_lines(self, summary: Optional[BudgetSummary] = None) -> list[str]:
        """Total, spent and available amounts as display lines."""
        summary = summary or self.build()
        symbol = self._settings.currency_symbol
        return [
            f"Total Budget: {format_currency(summary.total_budget, symbol)}",
            f"Total Expenses: {format_currency(summary.total_expense, symbol)}",
            f"Available Budget After Goals: {format_currency(summary.available_budget, symbol)}",
        ]

    def summary_lines(self, summary: Optional[BudgetSummary] = None) -> list[str]:
        """
        The Summary section as plain text lines.

        Handy for logging a snapshot.
        """
        summary = summary or self.build()
        return self.total_lines(summary) + summary.warnings
