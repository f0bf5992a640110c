"""
Flow tests for the orchestrator.

Each flow shares one model and one in-memory audit trail, the same
wiring the Streamlit app gets from create_app_components().
"""

import pytest
from uuid import uuid4

from budgetbuddy.config import BudgetSettings
from budgetbuddy.engine import BudgetValidationError
from budgetbuddy.models.audit import BudgetEventType
from budgetbuddy.models.budget import MAX_CATEGORY_NAME_LENGTH, MAX_TITLE_LENGTH, FixedCategory
from budgetbuddy.orchestrator import create_app_components


@pytest.fixture
def components():
    return create_app_components(BudgetSettings())


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_flows_share_one_model(self, components):
        """Every flow mutates the same model."""
        model, planner_flow, expense_flow, goal_flow, audit_logger = components
        assert planner_flow.model is model
        assert expense_flow.model is model
        assert goal_flow.model is model

    def test_trail_uses_history_limit(self):
        """The audit trail is bounded by the configured limit."""
        settings = BudgetSettings(audit_history_limit=3)
        model, planner_flow, _, _, audit_logger = create_app_components(settings)

        for income in (100, 200, 300, 400, 500):
            planner_flow.update_income(income)

        assert len(audit_logger.trail) == 3


class TestBudgetPlannerFlow:
    """Tests for the budget planner screen."""

    def test_update_income(self, components):
        """Valid income reaches the model."""
        model, planner_flow, _, _, _ = components
        result = planner_flow.update_income(1200)
        assert result.is_valid is True
        assert model.income == 1200

    def test_negative_income_not_applied(self, components):
        """Invalid income is reported and the model is untouched."""
        model, planner_flow, _, _, audit_logger = components
        planner_flow.update_income(500)

        result = planner_flow.update_income(-50)

        assert result.is_valid is False
        assert model.income == 500
        rejected = audit_logger.trail.get_recent_events(
            event_type=BudgetEventType.INPUT_VALIDATION_FAILED
        )
        assert len(rejected) == 1
        assert rejected[0].details["form"] == "income"

    def test_fixed_slider_is_pre_clamped(self, components):
        """A fixed slider cannot go past what income leaves for it."""
        model, planner_flow, _, _, audit_logger = components
        planner_flow.update_income(1000)
        planner_flow.move_fixed_slider(FixedCategory.RENT, 700)

        stored = planner_flow.move_fixed_slider(FixedCategory.FOOD, 600)

        assert stored == pytest.approx(300)
        assert model.rent_budget == pytest.approx(700)
        rebalances = audit_logger.trail.get_recent_events(
            event_type=BudgetEventType.ALLOCATIONS_REBALANCED
        )
        assert rebalances == []

    def test_custom_slider_returns_clamped_value(self, components):
        """The returned value is what the model kept."""
        model, planner_flow, _, _, _ = components
        planner_flow.update_income(1000)
        planner_flow.move_fixed_slider(FixedCategory.FOOD, 800)
        planner_flow.add_custom_category("Gym")

        stored = planner_flow.move_custom_slider("Gym", 500)

        assert stored == pytest.approx(200)
        assert model.total_budget == pytest.approx(1000)

    def test_add_custom_category(self, components):
        """Valid names are trimmed and added."""
        model, planner_flow, _, _, _ = components
        added, result = planner_flow.add_custom_category("  Gym  ")
        assert added is True
        assert result.is_valid is True
        assert model.custom_category_names == ["Gym"]

    def test_duplicate_custom_category(self, components):
        """Duplicates are stopped by validation before the model."""
        model, planner_flow, _, _, audit_logger = components
        planner_flow.add_custom_category("Gym")

        added, result = planner_flow.add_custom_category("Gym")

        assert added is False
        assert result.issues[0].issue_type == "duplicate"
        assert model.custom_category_names == ["Gym"]
        rejected = audit_logger.trail.get_recent_events(
            event_type=BudgetEventType.MUTATION_REJECTED
        )
        assert rejected == []

    def test_over_long_custom_category_rejected(self, components):
        """A name too long for an expense category never becomes a category."""
        model, planner_flow, _, _, _ = components

        added, result = planner_flow.add_custom_category("G" * (MAX_CATEGORY_NAME_LENGTH + 1))

        assert added is False
        assert result.issues[0].issue_type == "too_long"
        assert model.custom_category_names == []

    def test_model_errors_are_audited(self):
        """A strict-mode rejection is recorded as a system error and re-raised."""
        model, planner_flow, _, _, audit_logger = create_app_components(
            BudgetSettings(strict_validation=True)
        )

        with pytest.raises(BudgetValidationError):
            planner_flow.move_custom_slider("Unknown", 10)

        errors = audit_logger.trail.get_recent_events(event_type=BudgetEventType.SYSTEM_ERROR)
        assert len(errors) == 1
        assert errors[0].details["operation"] == "move_custom_slider"
        assert errors[0].error_message
        assert errors[0].correlation_id is not None
        assert model.custom_budgets == {}

    def test_events_share_correlation_id(self, components):
        """One user action groups its events under one ID."""
        _, planner_flow, _, _, audit_logger = components
        planner_flow.update_income(1000)
        planner_flow.move_fixed_slider(FixedCategory.FOOD, 800)
        correlation_id = uuid4()

        planner_flow.update_income(400, correlation_id=correlation_id)

        events = audit_logger.trail.get_recent_events(limit=3)
        assert [e.event_type for e in events[:2]] == [
            BudgetEventType.ALLOCATIONS_REBALANCED,
            BudgetEventType.INCOME_SET,
        ]
        assert all(e.correlation_id == correlation_id for e in events[:2])
        assert events[2].correlation_id != correlation_id
        assert audit_logger.correlation_id is None


class TestExpenseFlow:
    """Tests for the add-expense form."""

    def test_add_expense(self, components):
        """Valid expenses are appended."""
        model, _, expense_flow, _, _ = components
        expense, result = expense_flow.add_expense("Groceries", 120, "Food")

        assert expense is not None
        assert result.is_valid is True
        assert model.expenses == [expense]
        assert model.total_spent(FixedCategory.FOOD) == pytest.approx(120)

    def test_invalid_expense_rejected(self, components):
        """Invalid expenses never reach the model."""
        model, _, expense_flow, _, _ = components
        expense, result = expense_flow.add_expense("", 0, "Food")

        assert expense is None
        assert result.error_count == 2
        assert model.expenses == []

    def test_over_long_fields_rejected(self, components):
        """Over-long titles and categories are reported, not raised."""
        model, _, expense_flow, _, _ = components

        expense, result = expense_flow.add_expense("T" * (MAX_TITLE_LENGTH + 1), 10, "Food")
        assert expense is None
        assert result.issues[0].issue_type == "too_long"

        expense, result = expense_flow.add_expense("Gym", 10, "G" * (MAX_CATEGORY_NAME_LENGTH + 1))
        assert expense is None
        assert result.issues[0].field == "category"

        assert model.expenses == []

    def test_unknown_category_warns_but_adds(self, components):
        """An expense in an unknown category is kept with a warning."""
        model, _, expense_flow, _, _ = components
        expense, result = expense_flow.add_expense("Flowers", 15, "Gifts")

        assert expense is not None
        assert len(result.warnings) == 1
        assert model.total_expense == pytest.approx(15)
        assert model.categories_over_budget() == []

    def test_overspending_is_flagged(self, components):
        """Spending past a category allocation flags that category."""
        model, planner_flow, expense_flow, _, _ = components
        planner_flow.update_income(1000)
        planner_flow.move_fixed_slider(FixedCategory.TRAVEL, 100)

        expense_flow.add_expense("Train", 150, "Travel")

        assert model.categories_over_budget() == ["Travel"]
        assert model.is_over_budget is True


class TestGoalFlow:
    """Tests for the add-goal form."""

    def test_add_goal_reserves_budget(self, components):
        """Saved amounts reduce the available budget."""
        model, planner_flow, _, goal_flow, _ = components
        planner_flow.update_income(1000)
        planner_flow.move_fixed_slider(FixedCategory.RENT, 600)

        goal, result = goal_flow.add_goal("Laptop", 1000, 250)

        assert goal is not None
        assert result.is_valid is True
        assert model.goals_reserved == pytest.approx(250)
        assert model.available_budget == pytest.approx(350)

    def test_invalid_goal_rejected(self, components):
        """A zero target is an error."""
        model, _, _, goal_flow, _ = components
        goal, result = goal_flow.add_goal("Laptop", 0, 0)

        assert goal is None
        assert result.is_valid is False
        assert model.goals == []

    def test_over_long_name_rejected(self, components):
        """Goal names share the expense title limit."""
        model, _, _, goal_flow, _ = components
        goal, result = goal_flow.add_goal("N" * (MAX_TITLE_LENGTH + 1), 100, 0)

        assert goal is None
        assert result.issues[0].issue_type == "too_long"
        assert model.goals == []

    def test_over_saved_goal_warns(self, components):
        """Saving more than the target is allowed with a warning."""
        model, _, _, goal_flow, _ = components
        goal, result = goal_flow.add_goal("Phone", 300, 450)

        assert goal is not None
        assert goal.progress == 1.0
        assert result.warnings == ["Saved amount is more than the target"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
