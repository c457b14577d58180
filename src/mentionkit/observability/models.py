"""Data models for mention session audit events."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuditEventType(str, Enum):
    """Types of audit events logged by a mention session."""

    TRIGGER_ACTIVATED = "trigger_activated"
    TRIGGER_CLEARED = "trigger_cleared"
    MENTION_COMMITTED = "mention_committed"
    COMMIT_IGNORED = "commit_ignored"
    SPANS_DROPPED = "spans_dropped"
    CUSTOM_DATA_COLLECTED = "custom_data_collected"
    SESSION_CLOSED = "session_closed"


@dataclass
class AuditEvent:
    """A structured audit event for logging.

    Serialized to JSON for the ``mentionkit.audit`` logger.
    """

    event_type: AuditEventType
    """The type of audit event."""

    timestamp: datetime
    """When the event occurred."""

    session_id: str
    """The mention session that produced the event."""

    metadata: dict[str, Any] = field(default_factory=dict)
    """Event-specific metadata."""

    def to_dict(self) -> dict[str, Any]:
        """Convert the audit event to a dictionary for JSON serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "session_id": self.session_id,
            **self.metadata,
        }
