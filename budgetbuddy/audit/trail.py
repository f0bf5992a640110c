"""
Audit Trail Storage

DESIGN DECISION: We define an abstract interface for where audit events go.
This allows us to:
1. Keep the budget engine free of I/O
2. Use a bounded in-memory trail for the session's "recent activity"
3. Plug in another sink later without touching the engine

Nothing survives the session: the in-memory trail is the only
implementation shipped.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Optional

from budgetbuddy.models.audit import BudgetEvent, BudgetEventType


class AuditTrailInterface(ABC):
    """
    Abstract interface for audit event storage.

    Audit events are append-only - no updates or deletes.
    """

    @abstractmethod
    def append_event(self, event: BudgetEvent) -> bool:
        """
        Append an audit event.

        Args:
            event: The audit event to store

        Returns:
            True if stored successfully

        Raises:
            AuditTrailError: If the event could not be stored
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[BudgetEventType] = None,
    ) -> list[BudgetEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return
            event_type: Only return events of this type

        Returns:
            List of recent events (newest first)
        """
        pass

    @abstractmethod
    def get_events_for_entity(self, entity_id: str) -> list[BudgetEvent]:
        """
        Get all retained events for an entity, in chronological order.
        """
        pass


class InMemoryAuditTrail(AuditTrailInterface):
    """
    Bounded in-memory audit trail.

    Oldest events are dropped once max_events is reached.
    """

    def __init__(self, max_events: int = 200):
        if max_events < 1:
            raise ValueError("max_events must be at least 1")
        self._events: deque[BudgetEvent] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    def append_event(self, event: BudgetEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[BudgetEventType] = None,
    ) -> list[BudgetEvent]:
        events = [
            e for e in reversed(self._events)
            if event_type is None or e.event_type == event_type
        ]
        return events[:limit]

    def get_events_for_entity(self, entity_id: str) -> list[BudgetEvent]:
        return [e for e in self._events if e.entity_id == entity_id]


class AuditTrailError(Exception):
    """Audit event could not be stored."""
    pass
