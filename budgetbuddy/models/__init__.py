"""
Data Models Package

This package contains all Pydantic models used in Budget Buddy.
Everything the engine stores or reports conforms to these schemas.
"""

from budgetbuddy.models.budget import (
    BudgetSummary,
    CategoryStatus,
    Expense,
    FixedCategory,
    Goal,
    MAX_CATEGORY_NAME_LENGTH,
    MAX_TITLE_LENGTH,
)
from budgetbuddy.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from budgetbuddy.models.audit import (
    AuditSeverity,
    BudgetEvent,
    BudgetEventBuilder,
    BudgetEventType,
)

__all__ = [
    # Budget models
    "BudgetSummary",
    "CategoryStatus",
    "Expense",
    "FixedCategory",
    "Goal",
    "MAX_CATEGORY_NAME_LENGTH",
    "MAX_TITLE_LENGTH",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditSeverity",
    "BudgetEvent",
    "BudgetEventBuilder",
    "BudgetEventType",
]
