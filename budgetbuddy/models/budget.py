"""
Core Data Models for Budget Buddy

These models define the schemas for everything the budget engine stores
or reports. They are designed to:
1. Reject malformed entities at construction time
2. Be immutable once created (expenses and goals are never edited)
3. Be serializable for logging and display

DESIGN DECISION: Amounts are plain floats. The engine scales allocations
proportionally, so exact decimal arithmetic would not survive anyway;
comparisons use a small tolerance instead (see BudgetSettings).
"""

from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class FixedCategory(str, Enum):
    """
    The three always-present spending categories.

    DESIGN DECISION: These can never be removed and are the only
    allocations that rebalance() rescales.
    """
    FOOD = "Food"
    RENT = "Rent"
    TRAVEL = "Travel"

    @classmethod
    def names(cls) -> list[str]:
        """Display names in their fixed order."""
        return [member.value for member in cls]

    @classmethod
    def lookup(cls, name: str) -> Optional["FixedCategory"]:
        """Exact, case-sensitive match or None."""
        try:
            return cls(name)
        except ValueError:
            return None


# =============================================================================
# ENTITIES
# =============================================================================

# Length limits shared by the entities, the input validator and the engine
MAX_TITLE_LENGTH = 200
MAX_CATEGORY_NAME_LENGTH = 100


class Expense(BaseModel):
    """
    A single logged expense.

    The category is a plain name; it should reference an existing
    allocation but the engine does not enforce that.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="What the money was spent on"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=MAX_CATEGORY_NAME_LENGTH,
        description="Name of the category this expense is charged to"
    )


class Goal(BaseModel):
    """
    A savings goal.

    The saved amount reserves budget capacity: it is subtracted from the
    total budget to give the available budget. Saving more than the
    target is allowed.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique goal ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Goal name"
    )
    target_amount: float = Field(
        ...,
        gt=0,
        description="Amount to save in total"
    )
    saved_amount: float = Field(
        default=0.0,
        ge=0,
        description="Amount saved so far"
    )

    @property
    def progress(self) -> float:
        """Fraction of the target saved, capped at 1.0."""
        return min(self.saved_amount / self.target_amount, 1.0)

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.target_amount - self.saved_amount)

    @property
    def is_reached(self) -> bool:
        return self.saved_amount >= self.target_amount


# =============================================================================
# REPORTING MODELS
# =============================================================================

class CategoryStatus(BaseModel):
    """Spending status of one category."""

    name: str
    budget: float
    spent: float
    is_fixed: bool
    is_over_budget: bool

    @property
    def remaining(self) -> float:
        """Budget left in this category (negative when overspent)."""
        return self.budget - self.spent


class BudgetSummary(BaseModel):
    """
    Read-only snapshot of every derived value the UI renders.

    Built by SummaryBuilder; never fed back into the model.
    """

    income: float
    total_budget: float
    total_expense: float
    goals_reserved: float
    available_budget: float
    over_income_limit: bool
    is_over_budget: bool
    categories: list[CategoryStatus] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Warning lines in display order"
    )

    @property
    def unallocated_income(self) -> float:
        """Income not yet allocated to any category (negative when over)."""
        return self.income - self.total_budget

    @property
    def over_budget_categories(self) -> list[str]:
        return [c.name for c in self.categories if c.is_over_budget]
