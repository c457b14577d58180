"""Observability module: structured audit logging for mention sessions."""

from mentionkit.observability.audit import (
    AuditLogger,
    configure_audit_logging,
    configure_logging,
)
from mentionkit.observability.models import AuditEvent, AuditEventType

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "configure_audit_logging",
    "configure_logging",
]
