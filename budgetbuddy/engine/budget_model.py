"""
Budget Consistency Engine

DESIGN DECISION: The model owns income, allocations, expenses and goals,
and every mutator ends with an explicit rebalance() call. There are no
observers: the single point where the invariant is restored is visible
and testable on its own.

INVARIANT: food + rent + travel never exceeds income. When it would,
the three fixed allocations are scaled down proportionally.

Custom allocations follow a different rule: they are clamped when
assigned and never rescaled afterwards. Lowering income can therefore
leave the combined total above income; over_income_limit reports that,
nothing corrects it.

Single-threaded and synchronous. A host sharing one model across threads
must guard it with its own lock.
"""

import math
import sys
from typing import Optional, Union

import structlog

from budgetbuddy.audit import AuditLogger
from budgetbuddy.config import BudgetSettings, NegativeInputPolicy, get_settings
from budgetbuddy.engine.errors import BudgetValidationError, ValidationErrorKind
from budgetbuddy.models.audit import BudgetEvent, BudgetEventBuilder
from budgetbuddy.models.budget import (
    MAX_CATEGORY_NAME_LENGTH,
    Expense,
    FixedCategory,
    Goal,
)


CategoryRef = Union[FixedCategory, str]

# Rounding slack for _exceeds, in units of machine epsilon
_ROUNDING_ULPS = 8


class BudgetModel:
    """
    In-memory budget with self-healing fixed allocations.

    GUARANTEES:
    - Fixed allocations never sum above income after any mutator returns
    - A custom allocation never pushes the combined total above income
      at the moment it is assigned
    - Expenses and goals are append-only and keep insertion order
    """

    def __init__(
        self,
        settings: Optional[BudgetSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger("budgetbuddy.engine")

        self._income = 0.0
        self._fixed: dict[FixedCategory, float] = {c: 0.0 for c in FixedCategory}
        self._custom: dict[str, float] = {}
        self._expenses: list[Expense] = []
        self._goals: list[Goal] = []
        self._over_income_limit = False

    def __repr__(self) -> str:
        return (
            f"BudgetModel(income={self._income:.2f}, "
            f"total_budget={self.total_budget:.2f}, "
            f"custom={len(self._custom)}, expenses={len(self._expenses)}, "
            f"goals={len(self._goals)})"
        )

    # =========================================================================
    # MUTATORS
    # =========================================================================

    def set_income(self, value: float) -> None:
        """Store income, then rebalance fixed allocations against it."""
        amount = self._resolve_amount("set_income", "income", value)
        if amount is None:
            return

        previous = self._income
        self._income = amount
        self._audit(BudgetEventBuilder.income_set(previous, float(value), amount))
        self.rebalance()

    def set_fixed_allocation(self, category: CategoryRef, value: float) -> None:
        """
        Store the raw allocation for Food, Rent or Travel, then rebalance.

        The stored value may be reduced immediately if the fixed total
        now exceeds income. Callers may pre-clamp to fixed_allocation_cap()
        but the model does not rely on it.
        """
        fixed = FixedCategory.lookup(category)
        if fixed is None:
            self._reject(
                "set_fixed_allocation",
                ValidationErrorKind.UNKNOWN_CATEGORY,
                f"'{category}' is not one of {', '.join(FixedCategory.names())}",
                entity_id=str(category),
            )
            return

        amount = self._resolve_amount("set_fixed_allocation", fixed.value, value)
        if amount is None:
            return

        previous = self._fixed[fixed]
        self._fixed[fixed] = amount
        self._audit(BudgetEventBuilder.fixed_allocation_set(fixed.value, previous, amount))
        self.rebalance()

    def set_custom_allocation(self, name: str, requested: float) -> None:
        """
        Store a custom allocation clamped to [0, remaining income].

        remaining = income - (total_budget - current value for name).
        Does not fix a total that is already over income for other reasons.
        """
        if name not in self._custom:
            self._reject(
                "set_custom_allocation",
                ValidationErrorKind.UNKNOWN_CATEGORY,
                f"Custom category '{name}' does not exist",
                entity_id=str(name),
            )
            return

        requested = float(requested)
        if not math.isfinite(requested):
            self._reject(
                "set_custom_allocation",
                ValidationErrorKind.NON_FINITE_VALUE,
                f"{name} allocation must be a finite number",
                entity_id=name,
            )
            return

        remaining = self.custom_allocation_cap(name)
        stored = max(0.0, min(requested, remaining))
        self._custom[name] = stored
        self._audit(BudgetEventBuilder.custom_allocation_set(name, requested, stored, remaining))
        self.rebalance()

    def add_custom_category(self, name: str) -> bool:
        """
        Add a custom category with a zero allocation.

        The name is trimmed; empty or over-long names, existing custom
        names (case-sensitive) and fixed names are rejected.

        Returns True if the category was added.
        """
        trimmed = name.strip() if isinstance(name, str) else ""

        if not trimmed:
            self._reject(
                "add_custom_category",
                ValidationErrorKind.INVALID_NAME,
                "Category name cannot be empty",
            )
            return False

        if len(trimmed) > MAX_CATEGORY_NAME_LENGTH:
            self._reject(
                "add_custom_category",
                ValidationErrorKind.INVALID_NAME,
                f"Category name is longer than {MAX_CATEGORY_NAME_LENGTH} characters",
                entity_id=trimmed[:MAX_CATEGORY_NAME_LENGTH],
            )
            return False

        if (
            not self._settings.allow_fixed_name_custom_category
            and FixedCategory.lookup(trimmed) is not None
        ):
            self._reject(
                "add_custom_category",
                ValidationErrorKind.DUPLICATE_CATEGORY,
                f"'{trimmed}' is a predefined category",
                entity_id=trimmed,
            )
            return False

        if trimmed in self._custom:
            self._reject(
                "add_custom_category",
                ValidationErrorKind.DUPLICATE_CATEGORY,
                f"Custom category '{trimmed}' already exists",
                entity_id=trimmed,
            )
            return False

        self._custom[trimmed] = 0.0
        self._audit(BudgetEventBuilder.custom_category_added(trimmed))
        self.rebalance()
        return True

    def add_expense(self, expense: Expense) -> None:
        """
        Append an already-validated expense.

        Expenses built with model_construct() skip pydantic validation,
        so a non-positive amount is still rejected here.
        """
        if not expense.amount > 0:
            self._reject(
                "add_expense",
                ValidationErrorKind.NON_POSITIVE_AMOUNT,
                f"Expense amount must be positive ({expense.amount})",
                entity_id=str(expense.id),
            )
            return

        self._expenses.append(expense)
        self._audit(BudgetEventBuilder.expense_added(
            expense_id=expense.id,
            title=expense.title,
            amount=expense.amount,
            category=expense.category,
        ))
        self.rebalance()

    def add_goal(self, goal: Goal) -> None:
        """Append an already-validated savings goal."""
        if not goal.target_amount > 0:
            self._reject(
                "add_goal",
                ValidationErrorKind.NON_POSITIVE_AMOUNT,
                f"Goal target must be positive ({goal.target_amount})",
                entity_id=str(goal.id),
            )
            return

        self._goals.append(goal)
        self._audit(BudgetEventBuilder.goal_added(
            goal_id=goal.id,
            name=goal.name,
            target_amount=goal.target_amount,
            saved_amount=goal.saved_amount,
        ))
        self.rebalance()

    def rebalance(self) -> None:
        """
        Restore the fixed-allocation invariant and refresh over_income_limit.

        Fixed allocations are scaled by income / predefined_total when
        their sum exceeds income. Custom allocations are never touched.
        Running it twice in a row changes nothing the second time.
        """
        predefined_total = sum(self._fixed.values())

        # Zero total means nothing to scale (and nothing to divide by)
        if predefined_total > 0 and self._exceeds(predefined_total, self._income):
            scale = self._income / predefined_total
            for category in self._fixed:
                self._fixed[category] *= scale

            self._audit(BudgetEventBuilder.allocations_rebalanced(
                income=self._income,
                predefined_total=predefined_total,
                scale=scale,
                allocations=self.fixed_allocations,
            ))

        over_limit = self._exceeds(self.total_budget, self._income)
        if over_limit != self._over_income_limit:
            self._audit(BudgetEventBuilder.over_income_limit_changed(
                over_limit=over_limit,
                total_budget=self.total_budget,
                income=self._income,
            ))
        self._over_income_limit = over_limit

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def settings(self) -> BudgetSettings:
        return self._settings

    @property
    def income(self) -> float:
        return self._income

    @property
    def food_budget(self) -> float:
        return self._fixed[FixedCategory.FOOD]

    @property
    def rent_budget(self) -> float:
        return self._fixed[FixedCategory.RENT]

    @property
    def travel_budget(self) -> float:
        return self._fixed[FixedCategory.TRAVEL]

    @property
    def fixed_allocations(self) -> dict[str, float]:
        """Fixed allocations keyed by display name, in fixed order."""
        return {c.value: amount for c, amount in self._fixed.items()}

    @property
    def custom_budgets(self) -> dict[str, float]:
        """Copy of the custom allocations in insertion order."""
        return dict(self._custom)

    @property
    def custom_category_names(self) -> list[str]:
        return list(self._custom)

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    @property
    def goals(self) -> list[Goal]:
        return list(self._goals)

    # =========================================================================
    # DERIVED QUERIES
    # =========================================================================

    @property
    def total_budget(self) -> float:
        """Sum of fixed and custom allocations."""
        return sum(self._fixed.values()) + sum(self._custom.values())

    @property
    def total_expense(self) -> float:
        return sum(e.amount for e in self._expenses)

    @property
    def goals_reserved(self) -> float:
        """Budget capacity committed to savings goals."""
        return sum(g.saved_amount for g in self._goals)

    @property
    def available_budget(self) -> float:
        """Total budget minus goal reservations. Can be negative."""
        return self.total_budget - self.goals_reserved

    @property
    def over_income_limit(self) -> bool:
        """Combined allocations exceed income (as of the last rebalance)."""
        return self._over_income_limit

    @property
    def is_over_budget(self) -> bool:
        return self._exceeds(self.total_expense, self.available_budget)

    def category_budget(self, category: CategoryRef) -> float:
        """Allocation for a category name, 0 if unknown."""
        fixed = FixedCategory.lookup(category)
        if fixed is not None:
            return self._fixed[fixed]
        return self._custom.get(self._category_key(category), 0.0)

    def total_spent(self, category: CategoryRef) -> float:
        key = self._category_key(category)
        return sum(e.amount for e in self._expenses if e.category == key)

    def is_over_budget_for_category(self, category: CategoryRef) -> bool:
        return self._exceeds(self.total_spent(category), self.category_budget(category))

    def category_names(self) -> list[str]:
        """Fixed names followed by custom names in insertion order."""
        names = FixedCategory.names()
        return names + [n for n in self._custom if n not in names]

    def categories_over_budget(self) -> list[str]:
        return [n for n in self.category_names() if self.is_over_budget_for_category(n)]

    def fixed_allocation_cap(self, category: CategoryRef) -> float:
        """Largest value the category can take without forcing a rebalance."""
        fixed = FixedCategory.lookup(category)
        if fixed is None:
            return 0.0
        others = sum(self._fixed.values()) - self._fixed[fixed]
        return max(0.0, self._income - others)

    def custom_allocation_cap(self, name: str) -> float:
        """Largest value set_custom_allocation() would store for name."""
        current = self._custom.get(name, 0.0)
        return max(0.0, self._income - (self.total_budget - current))

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _exceeds(self, value: float, limit: float) -> bool:
        """
        value > limit by more than comparison_tolerance.

        A few ULPs of the operands are added to the absolute tolerance so
        that rounding left by a rescale is not mistaken for an overshoot.
        """
        noise = _ROUNDING_ULPS * sys.float_info.epsilon * max(abs(value), abs(limit))
        return value - limit > self._settings.comparison_tolerance + noise

    @staticmethod
    def _category_key(category: CategoryRef) -> str:
        if isinstance(category, FixedCategory):
            return category.value
        return category

    def _resolve_amount(self, operation: str, field: str, value: float) -> Optional[float]:
        """
        Apply the negative-input policy.

        Returns the amount to store, or None when the mutation is rejected.
        """
        amount = float(value)
        if not math.isfinite(amount):
            self._reject(
                operation,
                ValidationErrorKind.NON_FINITE_VALUE,
                f"{field} must be a finite number",
                entity_id=field,
            )
            return None

        if amount >= 0:
            return amount

        if self._settings.negative_input_policy == NegativeInputPolicy.CLAMP:
            self._logger.debug(
                "negative_input_clamped",
                operation=operation,
                field=field,
                value=amount,
            )
            return 0.0

        self._reject(
            operation,
            ValidationErrorKind.NEGATIVE_VALUE,
            f"{field} cannot be negative ({amount:.2f})",
            entity_id=field,
        )
        return None

    def _reject(
        self,
        operation: str,
        kind: ValidationErrorKind,
        message: str,
        entity_id: Optional[str] = None,
    ) -> None:
        """Record a rejected mutation; raise only in strict mode."""
        self._logger.warning(
            "mutation_rejected",
            operation=operation,
            kind=kind.value,
            message=message,
        )
        self._audit(BudgetEventBuilder.mutation_rejected(
            operation=operation,
            kind=kind.value,
            message=message,
            entity_id=entity_id,
        ))
        if self._settings.strict_validation:
            raise BudgetValidationError(kind, message, operation=operation)

    def _audit(self, event: BudgetEvent) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(event)
