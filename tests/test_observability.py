"""Tests for the observability module."""

import json
import logging
from datetime import datetime
from unittest.mock import patch

from mentionkit.config.settings import get_settings
from mentionkit.observability import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    configure_audit_logging,
    configure_logging,
)


class TestAuditEvent:
    """Tests for AuditEvent dataclass."""

    def test_to_dict(self):
        """Test serialization merges metadata."""
        event = AuditEvent(
            event_type=AuditEventType.MENTION_COMMITTED,
            timestamp=datetime(2024, 1, 15, 10, 30, 0),
            session_id="s-1",
            metadata={"trigger": "@"},
        )
        assert event.to_dict() == {
            "event_type": "mention_committed",
            "timestamp": "2024-01-15T10:30:00",
            "session_id": "s-1",
            "trigger": "@",
        }


class TestAuditLogger:
    """Tests for AuditLogger class."""

    def test_disabled_logger_does_not_emit(self):
        """Test that disabled logger doesn't emit events."""
        audit = AuditLogger(session_id="s-1", enabled=False)

        with patch.object(logging.getLogger("mentionkit.audit"), "info") as mock_info:
            audit.log_trigger_activated(trigger="@", query="jo")
            mock_info.assert_not_called()

    def test_log_trigger_activated(self):
        """Test logging a trigger activation."""
        audit = AuditLogger(session_id="s-1")

        with patch.object(logging.getLogger("mentionkit.audit"), "info") as mock_info:
            audit.log_trigger_activated(trigger="@", query="x" * 200)

        payload = json.loads(mock_info.call_args.args[0])
        assert payload["event_type"] == "trigger_activated"
        assert payload["session_id"] == "s-1"
        assert len(payload["query"]) == 100

    def test_log_mention_committed(self):
        """Test logging a commit."""
        audit = AuditLogger(session_id="s-1")

        with patch.object(logging.getLogger("mentionkit.audit"), "info") as mock_info:
            audit.log_mention_committed(trigger="@", name="John", mention_id="u1", has_data=True)

        payload = json.loads(mock_info.call_args.args[0])
        assert payload["event_type"] == "mention_committed"
        assert payload["mention_id"] == "u1"
        assert payload["has_data"] is True

    def test_zero_counts_not_logged(self):
        """Test empty drop and collection reports are skipped."""
        audit = AuditLogger(session_id="s-1")

        with patch.object(logging.getLogger("mentionkit.audit"), "info") as mock_info:
            audit.log_spans_dropped(0)
            audit.log_custom_data_collected([])
            mock_info.assert_not_called()

    def test_emit_failure_is_swallowed(self):
        """Test a failing handler does not raise into the caller."""
        audit = AuditLogger(session_id="s-1")

        with patch.object(
            logging.getLogger("mentionkit.audit"), "info", side_effect=RuntimeError("boom")
        ):
            audit.log_commit_ignored("no_host")


class TestConfigureAuditLogging:
    """Tests for configure_audit_logging function."""

    def test_configures_dedicated_handler(self):
        """Test that audit logger gets its own handler and stops propagating."""
        audit_log = logging.getLogger("mentionkit.audit")
        saved = (audit_log.handlers[:], audit_log.propagate, audit_log.level)
        try:
            audit_log.handlers = []
            configure_audit_logging("DEBUG")

            assert audit_log.level == logging.DEBUG
            assert len(audit_log.handlers) == 1
            assert audit_log.propagate is False

            configure_audit_logging("DEBUG")
            assert len(audit_log.handlers) == 1
        finally:
            audit_log.handlers, audit_log.propagate = saved[0], saved[1]
            audit_log.setLevel(saved[2])

    def test_level_defaults_to_settings(self, monkeypatch):
        """Test the audit level comes from MENTIONS_AUDIT_LOG_LEVEL."""
        monkeypatch.setenv("MENTIONS_AUDIT_LOG_LEVEL", "WARNING")
        get_settings.cache_clear()
        audit_log = logging.getLogger("mentionkit.audit")
        saved = (audit_log.handlers[:], audit_log.propagate, audit_log.level)
        try:
            audit_log.handlers = []
            configure_audit_logging()

            assert audit_log.level == logging.WARNING
            assert audit_log.handlers[0].level == logging.WARNING
        finally:
            audit_log.handlers, audit_log.propagate = saved[0], saved[1]
            audit_log.setLevel(saved[2])


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_explicit_level(self):
        """Test an explicit level is passed to basicConfig."""
        with patch("mentionkit.observability.audit.logging.basicConfig") as basic_config:
            configure_logging("debug")

        basic_config.assert_called_once()
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG
        assert "%(name)s" in basic_config.call_args.kwargs["format"]

    def test_level_defaults_to_settings(self, monkeypatch):
        """Test the level comes from MENTIONS_LOG_LEVEL when omitted."""
        monkeypatch.setenv("MENTIONS_LOG_LEVEL", "ERROR")
        get_settings.cache_clear()

        with patch("mentionkit.observability.audit.logging.basicConfig") as basic_config:
            configure_logging()

        assert basic_config.call_args.kwargs["level"] == logging.ERROR
