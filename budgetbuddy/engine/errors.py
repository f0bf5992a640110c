"""
Budget Engine Exceptions

Only raised when BudgetSettings.strict_validation is on. In the default
mode a rejected mutation is a logged no-op.
"""

from enum import Enum
from typing import Optional


class ValidationErrorKind(str, Enum):
    """Why a mutation was rejected."""
    INVALID_NAME = "invalid_name"
    DUPLICATE_CATEGORY = "duplicate_category"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    UNKNOWN_CATEGORY = "unknown_category"
    NEGATIVE_VALUE = "negative_value"
    NON_FINITE_VALUE = "non_finite_value"


class BudgetError(Exception):
    """Base exception for budget engine errors."""
    pass


class BudgetValidationError(BudgetError):
    """A mutation was rejected because its input broke a precondition."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str,
        operation: Optional[str] = None,
    ):
        self.kind = kind
        self.operation = operation
        super().__init__(message)
