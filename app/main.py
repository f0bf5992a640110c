"""
Streamlit Frontend for Budget Buddy

The screens a user interacts with: plan a budget, log expenses,
track savings goals and read a few budgeting tips.

DESIGN PRINCIPLES:
1. The UI owns no numbers; it renders what the model derives
2. Every form is validated before the model sees it
3. Warnings are always visible on the Budget page
4. One model per browser session, kept in st.session_state

Nothing is saved: closing the session discards the budget.
"""

import streamlit as st

from budgetbuddy.audit import configure_logging
from budgetbuddy.config import get_settings
from budgetbuddy.engine import BudgetError
from budgetbuddy.models.budget import FixedCategory
from budgetbuddy.orchestrator import create_app_components
from budgetbuddy.summary import SummaryBuilder, format_currency, warning_markup


# Page configuration
st.set_page_config(
    page_title="Budget Buddy",
    page_icon="💰",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .warning-line {
        color: #dc3545;
        font-weight: bold;
    }
    .category-warning-line {
        color: #fd7e14;
    }
</style>
""", unsafe_allow_html=True)


BUDGETING_TIPS = [
    "Track your income and expenses.",
    "Allocate budgets to categories wisely.",
    "Set savings goals.",
    "Avoid overspending.",
    "Review budgets monthly.",
]


def get_components():
    """Get or create this session's components."""
    if "components" not in st.session_state:
        settings = get_settings()
        configure_logging(settings)
        st.session_state.components = create_app_components(settings)
    return st.session_state.components


def main():
    """Main application entry point."""
    model, planner_flow, expense_flow, goal_flow, audit_logger = get_components()

    st.sidebar.title("💰 Budget Buddy")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["💳 Budget", "🧾 Expenses", "🎯 Goals", "📚 Learn", "🕑 Activity"],
        index=0,
    )

    try:
        if page == "💳 Budget":
            render_budget_page(planner_flow)
        elif page == "🧾 Expenses":
            render_expenses_page(expense_flow)
        elif page == "🎯 Goals":
            render_goals_page(goal_flow)
        elif page == "📚 Learn":
            render_learn_page()
        elif page == "🕑 Activity":
            render_activity_page(audit_logger)
    except BudgetError as e:
        # Only raised with strict_validation; the flow has already audited it
        st.error(f"❌ {e}")


def render_budget_page(planner_flow):
    """Render the budget planner page."""
    model = planner_flow.model
    settings = model.settings
    symbol = settings.currency_symbol

    st.title("💳 Budget Planner")

    st.subheader("Monthly Income")
    income = st.number_input(
        "Enter income",
        value=float(model.income),
        min_value=0.0,
        step=settings.slider_step,
    )
    if income != model.income:
        planner_flow.update_income(income)

    st.subheader("Predefined Budgets")
    for category in FixedCategory:
        current = model.category_budget(category)
        st.markdown(f"{category.value}: {format_currency(current, symbol)}")
        value = st.slider(
            category.value,
            min_value=0.0,
            max_value=settings.slider_max,
            value=min(float(current), settings.slider_max),
            step=settings.slider_step,
            label_visibility="collapsed",
        )
        if value != current:
            # Slider is re-created with the stored value on rerun
            if planner_flow.move_fixed_slider(category, value) != value:
                st.rerun()

    st.subheader("Custom Budgets")
    for name in model.custom_category_names:
        current = model.category_budget(name)
        col1, col2 = st.columns([4, 1])
        with col1:
            value = st.slider(
                name,
                min_value=0.0,
                max_value=settings.slider_max,
                value=min(float(current), settings.slider_max),
                step=settings.slider_step,
            )
        with col2:
            st.markdown(format_currency(current, symbol))
        if value != current:
            if planner_flow.move_custom_slider(name, value) != value:
                st.rerun()

    with st.form("add_category", clear_on_submit=True):
        new_category = st.text_input("Add Custom Category")
        if st.form_submit_button("Add"):
            added, result = planner_flow.add_custom_category(new_category)
            if added:
                st.rerun()
            elif not result.is_valid:
                st.error(planner_flow.validator.get_user_friendly_summary(result))

    st.subheader("Summary")
    builder = SummaryBuilder(model, settings)
    summary = builder.build()
    for line in builder.total_lines(summary):
        st.markdown(line)
    for markup in warning_markup(summary.warnings):
        st.markdown(markup, unsafe_allow_html=True)


def render_expenses_page(expense_flow):
    """Render the expenses page."""
    model = expense_flow.model
    symbol = model.settings.currency_symbol

    st.title("🧾 Expenses")

    with st.form("add_expense", clear_on_submit=True):
        st.subheader("Add Expense")
        title = st.text_input("Title")
        amount = st.number_input("Amount", min_value=0.0, step=1.0)
        category = st.selectbox("Category", options=model.category_names(), index=0)

        if st.form_submit_button("Add", type="primary"):
            expense, result = expense_flow.add_expense(title, amount, category)
            if expense is None:
                st.error(expense_flow.validator.get_user_friendly_summary(result))
            elif result.warnings:
                st.warning(expense_flow.validator.get_user_friendly_summary(result))

    st.subheader("Expenses")
    if not model.expenses:
        st.info("No expenses yet.")
    for expense in model.expenses:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(f"**{expense.title}**  \n:gray[{expense.category}]")
        with col2:
            st.markdown(format_currency(expense.amount, symbol))


def render_goals_page(goal_flow):
    """Render the savings goals page."""
    model = goal_flow.model
    symbol = model.settings.currency_symbol

    st.title("🎯 Goals")

    with st.form("add_goal", clear_on_submit=True):
        st.subheader("Add Goal")
        name = st.text_input("Goal Name")
        target_amount = st.number_input("Target Amount", min_value=0.0, step=100.0)
        saved_amount = st.number_input("Saved Amount", min_value=0.0, step=100.0)

        if st.form_submit_button("Add Goal", type="primary"):
            goal, result = goal_flow.add_goal(name, target_amount, saved_amount)
            if goal is None:
                st.error(goal_flow.validator.get_user_friendly_summary(result))
            elif result.warnings:
                st.warning(goal_flow.validator.get_user_friendly_summary(result))

    st.subheader("Goals")
    if not model.goals:
        st.info("No goals yet.")
    for goal in model.goals:
        st.markdown(f"**{goal.name}**")
        st.progress(goal.progress)
        col1, col2 = st.columns(2)
        with col1:
            st.caption(f"Saved: {format_currency(goal.saved_amount, symbol)}")
        with col2:
            st.caption(f"Target: {format_currency(goal.target_amount, symbol)}")


def render_learn_page():
    """Render the static budgeting tips."""
    st.title("📚 Learn")
    st.subheader("Budgeting Tips")
    for number, tip in enumerate(BUDGETING_TIPS, start=1):
        st.markdown(f"{number}. {tip}")


def render_activity_page(audit_logger):
    """Render the recent audit events of this session."""
    st.title("🕑 Recent Activity")

    if audit_logger.trail is None:
        st.info("Activity tracking is off.")
        return

    events = audit_logger.trail.get_recent_events(limit=50)
    if not events:
        st.info("Nothing has happened yet.")
        return

    for event in events:
        time, event_type, severity, entity, description, _ = event.to_display_row()
        icon = {"warning": "⚠️", "error": "❗"}.get(severity, "•")
        st.markdown(f"`{time}` {icon} {description}")


if __name__ == "__main__":
    main()
