"""
Main Orchestrator for Budget Buddy

This module ties together all the components and defines the
flows behind each user action:
1. Budget planner (income, sliders, custom categories)
2. Add expense form
3. Add goal form

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the model without passing input validation
- One model instance is shared by every flow (no global state)
- Every user action is audited under one correlation ID

The model still enforces its own invariant; the flows only make
sure the user hears about bad input instead of a silent no-op.
Anything the model raises is audited as a system error and re-raised.
"""

from contextlib import contextmanager, nullcontext
from typing import Iterator, Optional
from uuid import UUID

from budgetbuddy.audit import AuditLogger, InMemoryAuditTrail
from budgetbuddy.config import BudgetSettings, get_settings
from budgetbuddy.engine import BudgetModel
from budgetbuddy.models.audit import BudgetEventBuilder
from budgetbuddy.models.budget import Expense, FixedCategory, Goal
from budgetbuddy.models.validation import ValidationResult
from budgetbuddy.validation import BudgetInputValidator


def _issues_for_log(result: ValidationResult) -> list[dict]:
    return [
        {"field": i.field, "type": i.issue_type, "message": i.message}
        for i in result.issues
    ]


class _Flow:
    """Shared wiring: one model, one validator, one audit logger."""

    def __init__(
        self,
        model: BudgetModel,
        validator: Optional[BudgetInputValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._model = model
        self._validator = validator or BudgetInputValidator(model.settings)
        self._audit_logger = audit_logger

    @property
    def model(self) -> BudgetModel:
        return self._model

    @property
    def validator(self) -> BudgetInputValidator:
        return self._validator

    def _correlate(self, correlation_id: Optional[UUID]):
        if self._audit_logger is not None:
            return self._audit_logger.correlate(correlation_id)
        return nullcontext()

    @contextmanager
    def _logged_errors(self, operation: str) -> Iterator[None]:
        """Record anything the model raises as a system error, then re-raise."""
        try:
            yield
        except Exception as e:
            if self._audit_logger is not None:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": operation},
                )
            raise

    def _log_rejected(self, form: str, result: ValidationResult) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(BudgetEventBuilder.input_validation_failed(
                form=form,
                issues=_issues_for_log(result),
            ))


class BudgetPlannerFlow(_Flow):
    """
    Orchestrates the budget planner screen.

    Slider moves are pre-clamped to the value the model would keep, so
    the slider never jumps back after the model rebalances.
    """

    def update_income(
        self,
        value: Optional[float],
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """Validate and store a new income."""
        result = self._validator.validate_amount("income", value)
        with self._correlate(correlation_id):
            if not result.is_valid:
                self._log_rejected("income", result)
                return result
            with self._logged_errors("update_income"):
                self._model.set_income(value)
        return result

    def move_fixed_slider(
        self,
        category: FixedCategory,
        value: float,
        correlation_id: Optional[UUID] = None,
    ) -> float:
        """
        Apply a fixed-category slider move.

        Returns the allocation the model ended up storing.
        """
        capped = min(max(0.0, value), self._model.fixed_allocation_cap(category))
        with self._correlate(correlation_id), self._logged_errors("move_fixed_slider"):
            self._model.set_fixed_allocation(category, capped)
        return self._model.category_budget(category)

    def move_custom_slider(
        self,
        name: str,
        value: float,
        correlation_id: Optional[UUID] = None,
    ) -> float:
        """
        Apply a custom-category slider move.

        Returns the allocation the model ended up storing.
        """
        with self._correlate(correlation_id), self._logged_errors("move_custom_slider"):
            self._model.set_custom_allocation(name, value)
        return self._model.category_budget(name)

    def add_custom_category(
        self,
        name: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> tuple[bool, ValidationResult]:
        """
        Validate and add a custom category.

        Returns:
            (added, validation_result)
        """
        result = self._validator.validate_category_name(
            name, self._model.custom_category_names
        )
        with self._correlate(correlation_id):
            if not result.is_valid:
                self._log_rejected("custom_category", result)
                return False, result
            with self._logged_errors("add_custom_category"):
                added = self._model.add_custom_category(name)
        return added, result


class ExpenseFlow(_Flow):
    """
    Orchestrates the add-expense form.

    Flow:
    1. Validate title, amount and category
    2. Build the Expense
    3. Append it to the model
    """

    def add_expense(
        self,
        title: Optional[str],
        amount: Optional[float],
        category: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Expense], ValidationResult]:
        """
        Returns:
            (expense, validation_result); expense is None when rejected.
        """
        result = self._validator.validate_expense(
            title=title,
            amount=amount,
            category=category,
            known_categories=self._model.category_names(),
        )
        with self._correlate(correlation_id):
            if not result.is_valid:
                self._log_rejected("expense", result)
                return None, result

            with self._logged_errors("add_expense"):
                expense = Expense(title=title, amount=amount, category=category)
                self._model.add_expense(expense)
        return expense, result


class GoalFlow(_Flow):
    """
    Orchestrates the add-goal form.

    Flow:
    1. Validate name, target and saved amounts
    2. Build the Goal
    3. Append it to the model
    """

    def add_goal(
        self,
        name: Optional[str],
        target_amount: Optional[float],
        saved_amount: Optional[float] = 0.0,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Goal], ValidationResult]:
        """
        Returns:
            (goal, validation_result); goal is None when rejected.
        """
        result = self._validator.validate_goal(name, target_amount, saved_amount)
        with self._correlate(correlation_id):
            if not result.is_valid:
                self._log_rejected("goal", result)
                return None, result

            with self._logged_errors("add_goal"):
                goal = Goal(name=name, target_amount=target_amount, saved_amount=saved_amount)
                self._model.add_goal(goal)
        return goal, result


def create_app_components(
    settings: Optional[BudgetSettings] = None,
) -> tuple[BudgetModel, BudgetPlannerFlow, ExpenseFlow, GoalFlow, AuditLogger]:
    """
    Factory function to create all application components.

    One BudgetModel is created and shared by every flow.

    Returns:
        (model, planner_flow, expense_flow, goal_flow, audit_logger)
    """
    settings = settings or get_settings()

    audit_logger = AuditLogger(InMemoryAuditTrail(settings.audit_history_limit))
    model = BudgetModel(settings=settings, audit_logger=audit_logger)
    validator = BudgetInputValidator(settings)

    planner_flow = BudgetPlannerFlow(model, validator, audit_logger)
    expense_flow = ExpenseFlow(model, validator, audit_logger)
    goal_flow = GoalFlow(model, validator, audit_logger)

    return model, planner_flow, expense_flow, goal_flow, audit_logger
