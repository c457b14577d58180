"""Structured audit logging for mention sessions.

Emits one JSON document per event on the dedicated ``mentionkit.audit``
logger, separate from the application logs.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from mentionkit.config.settings import get_settings
from mentionkit.observability.models import AuditEvent, AuditEventType

audit_logger = logging.getLogger("mentionkit.audit")


class AuditLogger:
    """Structured audit logger bound to one mention session.

    Usage:
        audit = AuditLogger(session_id="composer-1")
        audit.log_trigger_activated(trigger="@", query="jo")
        audit.log_mention_committed(trigger="@", name="John", mention_id="u1", has_data=True)
    """

    def __init__(self, session_id: str, enabled: bool = True) -> None:
        """Initialize the audit logger.

        Args:
            session_id: The session identifier for correlation.
            enabled: Whether audit logging is enabled.
        """
        self._session_id = session_id
        self._enabled = enabled

    @property
    def session_id(self) -> str:
        return self._session_id

    def _emit(self, event_type: AuditEventType, **metadata: Any) -> None:
        if not self._enabled:
            return

        event = AuditEvent(
            event_type=event_type,
            timestamp=datetime.now(UTC),
            session_id=self._session_id,
            metadata=metadata,
        )
        try:
            audit_logger.info(json.dumps(event.to_dict(), default=str))
        except Exception as e:
            # Audit failures must not break editing
            logging.getLogger(__name__).warning("Failed to emit audit event: %s", e)

    def log_trigger_activated(self, trigger: str, query: str) -> None:
        """Log an IDLE -> MATCHING transition.

        Args:
            trigger: The active trigger symbol.
            query: The query at activation (max 100 chars).
        """
        self._emit(AuditEventType.TRIGGER_ACTIVATED, trigger=trigger, query=query[:100])

    def log_trigger_cleared(self, trigger: str, reason: str) -> None:
        """Log a MATCHING -> IDLE transition.

        Args:
            trigger: The trigger that was active.
            reason: Why it cleared (no_match, selection, committed).
        """
        self._emit(AuditEventType.TRIGGER_CLEARED, trigger=trigger, reason=reason)

    def log_mention_committed(
        self,
        trigger: str,
        name: str,
        mention_id: str,
        has_data: bool = False,
    ) -> None:
        """Log a committed suggestion."""
        self._emit(
            AuditEventType.MENTION_COMMITTED,
            trigger=trigger,
            name=name[:100],
            mention_id=mention_id,
            has_data=has_data,
        )

    def log_commit_ignored(self, reason: str) -> None:
        """Log a commit request that was a no-op (no_trigger, no_host)."""
        self._emit(AuditEventType.COMMIT_IGNORED, reason=reason)

    def log_spans_dropped(self, count: int) -> None:
        """Log that reconciliation dropped previously committed spans."""
        if count <= 0:
            return
        self._emit(AuditEventType.SPANS_DROPPED, count=count)

    def log_custom_data_collected(self, keys: list[str]) -> None:
        """Log custom data entries removed by reconciliation."""
        if not keys:
            return
        self._emit(AuditEventType.CUSTOM_DATA_COLLECTED, keys=sorted(keys))

    def log_session_closed(self, mention_count: int) -> None:
        self._emit(AuditEventType.SESSION_CLOSED, mention_count=mention_count)


def configure_audit_logging(level: str | None = None) -> None:
    """Configure the audit logger with its own handler.

    Args:
        level: The logging level for audit events. Defaults to
            ``settings.audit_log_level``.
    """
    if level is None:
        level = get_settings().audit_log_level
    audit_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only add handler if not already configured
    if not audit_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(getattr(logging, level.upper(), logging.INFO))

        # Simple format - the message is already JSON
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)

        audit_logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate output
    audit_logger.propagate = False


def configure_logging(level: str | None = None) -> None:
    """Configure application logging for hosts that have no setup of their own.

    Args:
        level: Root logging level. Defaults to ``settings.log_level``.
    """
    if level is None:
        level = get_settings().log_level.value
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
