"""
Audit Models for Budget Buddy

Every mutation of the budget model is logged for audit purposes.
This provides:
1. Traceability of how allocations reached their current values
2. Debugging information when a rebalance surprises the user
3. A "recent activity" list the UI can show

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class BudgetEventType(str, Enum):
    """
    Types of events we audit.

    Every mutator of the budget model has its own event type.
    """
    # Income and allocations
    INCOME_SET = "income_set"
    FIXED_ALLOCATION_SET = "fixed_allocation_set"
    CUSTOM_ALLOCATION_SET = "custom_allocation_set"
    CUSTOM_CATEGORY_ADDED = "custom_category_added"

    # Consistency engine
    ALLOCATIONS_REBALANCED = "allocations_rebalanced"
    OVER_INCOME_LIMIT_CHANGED = "over_income_limit_changed"

    # Ledger
    EXPENSE_ADDED = "expense_added"
    GOAL_ADDED = "goal_added"

    # Rejections
    MUTATION_REJECTED = "mutation_rejected"
    INPUT_VALIDATION_FAILED = "input_validation_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class BudgetEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every mutation creates at least one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: BudgetEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'income', 'category', 'expense', 'goal')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Category name or entity UUID this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }

    def to_display_row(self) -> list:
        """
        Convert to a row for the recent-activity table.

        Returns columns in order:
        [timestamp, event_type, severity, entity_id, description, details_json]
        """
        return [
            self.timestamp.strftime("%H:%M:%S"),
            self.event_type.value,
            self.severity.value,
            self.entity_id or "",
            self.description,
            json.dumps(self.details) if self.details else "",
        ]


class BudgetEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = BudgetEventBuilder.income_set(previous, new)
        event = BudgetEventBuilder.expense_added(expense_id, title, amount, category)
    """

    @staticmethod
    def income_set(
        previous: float,
        requested: float,
        stored: float,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.INCOME_SET,
            entity_type="income",
            description=f"Income changed from {previous:.2f} to {stored:.2f}",
            details={
                "previous": previous,
                "requested": requested,
                "stored": stored,
            },
        )

    @staticmethod
    def fixed_allocation_set(
        category: str,
        previous: float,
        requested: float,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.FIXED_ALLOCATION_SET,
            entity_type="category",
            entity_id=category,
            description=f"{category} allocation set to {requested:.2f}",
            details={
                "previous": previous,
                "requested": requested,
            },
        )

    @staticmethod
    def custom_allocation_set(
        category: str,
        requested: float,
        stored: float,
        remaining: float,
    ) -> BudgetEvent:
        clamped = stored != requested
        return BudgetEvent(
            event_type=BudgetEventType.CUSTOM_ALLOCATION_SET,
            severity=AuditSeverity.WARNING if clamped else AuditSeverity.INFO,
            entity_type="category",
            entity_id=category,
            description=(
                f"{category} allocation clamped to {stored:.2f} (requested {requested:.2f})"
                if clamped
                else f"{category} allocation set to {stored:.2f}"
            ),
            details={
                "requested": requested,
                "stored": stored,
                "remaining": remaining,
                "clamped": clamped,
            },
        )

    @staticmethod
    def custom_category_added(name: str) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.CUSTOM_CATEGORY_ADDED,
            entity_type="category",
            entity_id=name,
            description=f"Custom category added: {name}",
        )

    @staticmethod
    def allocations_rebalanced(
        income: float,
        predefined_total: float,
        scale: float,
        allocations: dict[str, float],
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.ALLOCATIONS_REBALANCED,
            severity=AuditSeverity.WARNING,
            entity_type="category",
            description=(
                f"Fixed allocations ({predefined_total:.2f}) exceeded income "
                f"({income:.2f}); scaled by {scale:.4f}"
            ),
            details={
                "income": income,
                "predefined_total": predefined_total,
                "scale": scale,
                "allocations": allocations,
            },
        )

    @staticmethod
    def over_income_limit_changed(
        over_limit: bool,
        total_budget: float,
        income: float,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.OVER_INCOME_LIMIT_CHANGED,
            severity=AuditSeverity.WARNING if over_limit else AuditSeverity.INFO,
            entity_type="income",
            description=(
                "Total budget exceeds income"
                if over_limit
                else "Total budget is back within income"
            ),
            details={
                "over_income_limit": over_limit,
                "total_budget": total_budget,
                "income": income,
            },
        )

    @staticmethod
    def expense_added(
        expense_id: UUID,
        title: str,
        amount: float,
        category: str,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=str(expense_id),
            description=f"Expense added: {title} ({amount:.2f} in {category})",
            details={
                "title": title,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def goal_added(
        goal_id: UUID,
        name: str,
        target_amount: float,
        saved_amount: float,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.GOAL_ADDED,
            entity_type="goal",
            entity_id=str(goal_id),
            description=f"Goal added: {name} ({saved_amount:.2f} of {target_amount:.2f})",
            details={
                "name": name,
                "target_amount": target_amount,
                "saved_amount": saved_amount,
            },
        )

    @staticmethod
    def mutation_rejected(
        operation: str,
        kind: str,
        message: str,
        entity_id: Optional[str] = None,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.MUTATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_id=entity_id,
            description=f"{operation} rejected: {message}",
            error_code=kind,
            error_message=message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def input_validation_failed(
        form: str,
        issues: list[dict],
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.INPUT_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"{form} form rejected with {len(issues)} issues",
            details={
                "form": form,
                "issues": issues,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> BudgetEvent:
        return BudgetEvent(
            event_type=BudgetEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
