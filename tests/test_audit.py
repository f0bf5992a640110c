"""
Tests for the audit logger and the in-memory audit trail.
"""

import logging

import pytest
from uuid import uuid4

from budgetbuddy.audit import (
    AuditLogger,
    AuditTrailError,
    AuditTrailInterface,
    InMemoryAuditTrail,
    configure_logging,
    create_correlation_id,
)
from budgetbuddy.config import BudgetSettings
from budgetbuddy.models.audit import (
    AuditSeverity,
    BudgetEvent,
    BudgetEventBuilder,
    BudgetEventType,
)


class FailingTrail(AuditTrailInterface):
    """Trail whose writes always fail."""

    def append_event(self, event):
        raise AuditTrailError("trail unavailable")

    def get_recent_events(self, limit=100, event_type=None):
        return []

    def get_events_for_entity(self, entity_id):
        return []


def make_event(event_type=BudgetEventType.INCOME_SET, entity_id=None):
    return BudgetEvent(event_type=event_type, entity_id=entity_id, description="test")


class TestInMemoryAuditTrail:
    """Tests for the bounded trail."""

    def test_recent_events_newest_first(self):
        """Recent events come back in reverse order."""
        trail = InMemoryAuditTrail()
        first, second = make_event(), make_event()
        trail.append_event(first)
        trail.append_event(second)

        assert trail.get_recent_events() == [second, first]
        assert trail.get_recent_events(limit=1) == [second]

    def test_filter_by_event_type(self):
        """Only events of the requested type are returned."""
        trail = InMemoryAuditTrail()
        trail.append_event(make_event(BudgetEventType.INCOME_SET))
        goal = make_event(BudgetEventType.GOAL_ADDED)
        trail.append_event(goal)

        assert trail.get_recent_events(event_type=BudgetEventType.GOAL_ADDED) == [goal]

    def test_oldest_events_dropped(self):
        """The trail keeps at most max_events."""
        trail = InMemoryAuditTrail(max_events=2)
        events = [make_event() for _ in range(3)]
        for event in events:
            trail.append_event(event)

        assert len(trail) == 2
        assert trail.get_recent_events() == [events[2], events[1]]

    def test_events_for_entity_chronological(self):
        """Entity history is oldest first."""
        trail = InMemoryAuditTrail()
        added = make_event(BudgetEventType.CUSTOM_CATEGORY_ADDED, "Gym")
        trail.append_event(added)
        trail.append_event(make_event(BudgetEventType.FIXED_ALLOCATION_SET, "Food"))
        allocated = make_event(BudgetEventType.CUSTOM_ALLOCATION_SET, "Gym")
        trail.append_event(allocated)

        assert trail.get_events_for_entity("Gym") == [added, allocated]

    def test_invalid_size(self):
        """A trail must hold at least one event."""
        with pytest.raises(ValueError):
            InMemoryAuditTrail(max_events=0)


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_without_trail(self):
        """Logging locally only still succeeds."""
        logger = AuditLogger()
        assert logger.trail is None
        assert logger.log(make_event()) is True

    def test_log_appends_to_empty_trail(self):
        """An empty trail still receives events."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)

        assert logger.log(make_event()) is True
        assert len(trail) == 1

    def test_trail_failure_is_swallowed(self):
        """A failing trail never breaks the caller."""
        logger = AuditLogger(FailingTrail())
        assert logger.log(make_event()) is False

    def test_correlate_tags_events(self):
        """Events inside a correlate block carry its ID."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)
        correlation_id = uuid4()

        with logger.correlate(correlation_id) as active:
            assert active == correlation_id
            logger.log(make_event())
        logger.log(make_event())

        inside, outside = trail.get_recent_events()[::-1]
        assert inside.correlation_id == correlation_id
        assert outside.correlation_id is None
        assert logger.correlation_id is None

    def test_nested_correlate_reuses_outer_id(self):
        """A nested block does not start a new group."""
        logger = AuditLogger()

        with logger.correlate() as outer:
            with logger.correlate(uuid4()) as inner:
                assert inner == outer
            assert logger.correlation_id == outer

    def test_existing_correlation_id_kept(self):
        """An event that already has an ID is not re-tagged."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)
        own_id = create_correlation_id()
        event = make_event().model_copy(update={"correlation_id": own_id})

        with logger.correlate():
            logger.log(event)

        assert trail.get_recent_events()[0].correlation_id == own_id

    def test_log_error(self):
        """Errors are recorded as system error events."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)

        logger.log_error("render_failed", "slider out of range", {"page": "budget"})

        event = trail.get_recent_events()[0]
        assert event.event_type == BudgetEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"page": "budget"}

    def test_builder_events_logged(self):
        """Builder output is accepted as-is."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)

        logger.log(BudgetEventBuilder.custom_category_added("Gym"))

        assert trail.get_events_for_entity("Gym")[0].description == "Custom category added: Gym"


class TestConfigureLogging:
    """Tests for stdlib logging setup."""

    def test_level_follows_debug_mode(self, monkeypatch):
        """debug_mode switches the root level to DEBUG."""
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging(BudgetSettings(debug_mode=True))
        configure_logging(BudgetSettings(debug_mode=False))

        assert [c["level"] for c in calls] == [logging.DEBUG, logging.INFO]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
