"""
Audit Logger

DESIGN DECISION: Every mutation of the budget model is logged.
This provides:
1. Traceability of every allocation change
2. Debugging capability for surprising rebalances
3. A history the user can see in the UI

The audit logger:
- Is synchronous, like the engine it serves
- Gracefully handles failures (never breaks a mutation if logging fails)
- Supports correlation IDs to group the events of one user action
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import UUID, uuid4

import structlog

from budgetbuddy.audit.trail import AuditTrailInterface
from budgetbuddy.config import BudgetSettings, get_settings
from budgetbuddy.models.audit import BudgetEvent, BudgetEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit trail (for the UI's recent activity)
    """

    def __init__(
        self,
        trail: Optional[AuditTrailInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            trail: Where events are kept for later display.
                   If None, only logs locally.
        """
        self._trail = trail
        self._logger = structlog.get_logger("budgetbuddy.audit")
        self._correlation_id: Optional[UUID] = None

    @property
    def trail(self) -> Optional[AuditTrailInterface]:
        return self._trail

    @property
    def correlation_id(self) -> Optional[UUID]:
        return self._correlation_id

    @contextmanager
    def correlate(self, correlation_id: Optional[UUID] = None) -> Iterator[UUID]:
        """
        Tag every event logged inside the block with one correlation ID.

        Nested blocks reuse the outer ID so one user action stays one group.
        """
        if self._correlation_id is not None:
            yield self._correlation_id
            return

        self._correlation_id = correlation_id or create_correlation_id()
        try:
            yield self._correlation_id
        finally:
            self._correlation_id = None

    def log(self, event: BudgetEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to the trail if available.

        Returns True if the trail write succeeded (or no trail configured).
        """
        if event.correlation_id is None and self._correlation_id is not None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})

        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._trail is not None:
            try:
                return self._trail.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_trail_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(BudgetEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))


def configure_logging(settings: Optional[BudgetSettings] = None) -> None:
    """
    Send structlog output to stderr through stdlib logging.

    DEBUG level when debug_mode is on, INFO otherwise. Does nothing if
    the root logger already has handlers.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug_mode else logging.INFO,
        format="%(message)s",
    )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., submitting a form).
    """
    return uuid4()
