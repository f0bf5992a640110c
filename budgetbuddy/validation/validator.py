"""
Form Input Validation

DESIGN DECISION: The budget model trusts what it is given. Everything a
user types goes through this validator first, so the UI can explain
what is wrong instead of the model silently ignoring the input.

Checks mirror the model's preconditions:
- Titles and names must be non-empty after trimming and within the
  length limits of the Expense and Goal models
- Expense amounts and goal targets must be positive
- Category names must be unique
- Income and allocations must not be negative

IMPORTANT: Validation NEVER silently fixes input.
It reports issues for the user to correct.
"""

import math
from typing import Iterable, Optional

from budgetbuddy.config import BudgetSettings, get_settings
from budgetbuddy.models.budget import (
    MAX_CATEGORY_NAME_LENGTH,
    MAX_TITLE_LENGTH,
    FixedCategory,
)
from budgetbuddy.models.validation import ValidationIssue, ValidationResult


class BudgetInputValidator:
    """
    Validates form submissions before they reach the budget model.

    Every method returns a ValidationResult; none of them raise.
    """

    def __init__(self, settings: Optional[BudgetSettings] = None):
        self._settings = settings or get_settings()

    def _check_name(
        self,
        field: str,
        value: Optional[str],
        label: str,
        max_length: int,
    ) -> list[ValidationIssue]:
        if value is None or not value.strip():
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
                severity="error",
                suggested_fix=f"Enter a {label.lower()}",
            )]
        if len(value.strip()) > max_length:
            return [ValidationIssue(
                field=field,
                issue_type="too_long",
                message=f"{label} cannot be longer than {max_length} characters",
                severity="error",
                suggested_fix="Use a shorter name",
            )]
        return []

    def _check_number(
        self,
        field: str,
        value: Optional[float],
        label: str,
        allow_zero: bool,
    ) -> list[ValidationIssue]:
        if value is None or not math.isfinite(value):
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} must be a number",
                severity="error",
            )]

        if value < 0 or (value == 0 and not allow_zero):
            qualifier = "negative" if allow_zero else "zero or negative"
            return [ValidationIssue(
                field=field,
                issue_type="negative" if allow_zero else "non_positive",
                message=f"{label} cannot be {qualifier}",
                severity="error",
                suggested_fix=(
                    "Enter an amount of 0 or more"
                    if allow_zero
                    else "Enter an amount greater than 0"
                ),
            )]
        return []

    def validate_expense(
        self,
        title: Optional[str],
        amount: Optional[float],
        category: Optional[str],
        known_categories: Iterable[str] = (),
    ) -> ValidationResult:
        """
        Validate the add-expense form.

        An unknown category is only a warning: the model accepts it and
        the expense simply counts against no allocation.
        """
        issues = []
        issues.extend(self._check_name("title", title, "Title", MAX_TITLE_LENGTH))
        issues.extend(self._check_number("amount", amount, "Amount", allow_zero=False))
        issues.extend(self._check_name("category", category, "Category", MAX_CATEGORY_NAME_LENGTH))

        known = list(known_categories)
        if category and category.strip() and known and category.strip() not in known:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"'{category.strip()}' has no budget allocation",
                severity="warning",
                suggested_fix="Add it as a custom category first",
            ))

        return ValidationResult.from_issues(issues)

    def validate_goal(
        self,
        name: Optional[str],
        target_amount: Optional[float],
        saved_amount: Optional[float],
    ) -> ValidationResult:
        """Validate the add-goal form."""
        issues = []
        issues.extend(self._check_name("name", name, "Goal name", MAX_TITLE_LENGTH))
        target_issues = self._check_number(
            "target_amount", target_amount, "Target amount", allow_zero=False
        )
        saved_issues = self._check_number(
            "saved_amount", saved_amount, "Saved amount", allow_zero=True
        )
        issues.extend(target_issues)
        issues.extend(saved_issues)

        if not target_issues and not saved_issues and saved_amount > target_amount:
            issues.append(ValidationIssue(
                field="saved_amount",
                issue_type="exceeds_target",
                message="Saved amount is more than the target",
                severity="warning",
                suggested_fix="Check both amounts",
            ))

        return ValidationResult.from_issues(issues)

    def validate_category_name(
        self,
        name: Optional[str],
        existing_custom: Iterable[str] = (),
    ) -> ValidationResult:
        """Validate the add-custom-category field."""
        issues = self._check_name("name", name, "Category name", MAX_CATEGORY_NAME_LENGTH)

        if not issues:
            trimmed = name.strip()
            if (
                not self._settings.allow_fixed_name_custom_category
                and FixedCategory.lookup(trimmed) is not None
            ):
                issues.append(ValidationIssue(
                    field="name",
                    issue_type="duplicate",
                    message=f"'{trimmed}' is already a predefined category",
                    severity="error",
                    suggested_fix="Use its slider under Predefined Budgets",
                ))
            elif trimmed in set(existing_custom):
                issues.append(ValidationIssue(
                    field="name",
                    issue_type="duplicate",
                    message=f"'{trimmed}' already exists",
                    severity="error",
                    suggested_fix="Choose a different name",
                ))

        return ValidationResult.from_issues(issues)

    def validate_amount(
        self,
        field: str,
        value: Optional[float],
    ) -> ValidationResult:
        """Validate an income or allocation entry (zero allowed)."""
        label = field.replace("_", " ").capitalize()
        return ValidationResult.from_issues(
            self._check_number(field, value, label, allow_zero=True)
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All good!"

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please note:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
