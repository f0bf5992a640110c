"""Audit logging package."""

from budgetbuddy.audit.logger import (
    AuditLogger,
    configure_logging,
    create_correlation_id,
)
from budgetbuddy.audit.trail import (
    AuditTrailError,
    AuditTrailInterface,
    InMemoryAuditTrail,
)

__all__ = [
    "AuditLogger",
    "AuditTrailError",
    "AuditTrailInterface",
    "InMemoryAuditTrail",
    "configure_logging",
    "create_correlation_id",
]
