"""Mention session controller.

Combines trigger detection and span reconciliation for one text surface,
and commits selected suggestions into the text.
"""

import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from mentionkit.config import TriggerConfig, TriggersLike, coerce_triggers, get_settings
from mentionkit.models import MentionData, MentionSpan, MentionSuggestion
from mentionkit.observability import AuditLogger
from mentionkit.parsing import detect_trigger
from mentionkit.session.scheduler import Scheduler, call_soon
from mentionkit.session.state import MentionSnapshot, SessionState, TargetRange
from mentionkit.session.store import MentionStore

logger = logging.getLogger(__name__)


class MentionSessionError(RuntimeError):
    """Raised when a session-level operation is used without a live session."""

    pass


class TextHost(Protocol):
    """The text surface a session writes committed mentions into."""

    @property
    def current_value(self) -> str: ...

    def replace_value(self, text: str) -> None: ...

    def request_focus(self) -> None: ...


class MentionSession:
    """Stateful orchestrator for mention tagging on one text surface.

    The host forwards every text and selection change through
    ``on_text_or_selection_change``. The session keeps the live trigger state
    (IDLE or MATCHING) and the reconciled mention spans. ``commit_mention``
    writes a selected suggestion into the host's text.

    After a commit, detection and reconciliation are suppressed until the
    next scheduling tick so the host's in-flight stale text cannot re-trigger
    a different state.
    """

    def __init__(
        self,
        triggers: TriggersLike,
        scheduler: Scheduler | None = None,
        lookback_limit: int | None = None,
        on_mentions_change: Callable[[list[MentionSpan]], None] | None = None,
        session_id: str | None = None,
        audit_enabled: bool | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            triggers: The trigger set, fixed for the session lifetime.
            scheduler: Runs the deferred suppression lift. Defaults to
                ``call_soon``; outside an asyncio loop the host must then call
                ``run_pending`` once per tick.
            lookback_limit: Detection window size. Defaults to settings.
            on_mentions_change: Called with the new span list when it changes.
            session_id: Identifier for audit events. Random if omitted.
            audit_enabled: Whether to emit audit events. Defaults to settings.
        """
        settings = get_settings()
        self._triggers = coerce_triggers(triggers)
        self._scheduler = scheduler or call_soon
        self._lookback_limit = (
            lookback_limit if lookback_limit is not None else settings.lookback_limit
        )
        self._on_mentions_change = on_mentions_change
        self._state = SessionState()
        self._store = MentionStore(self._triggers)
        self._host: TextHost | None = None
        self._inserting = False
        self._closed = False
        self._audit = AuditLogger(
            session_id=session_id or uuid.uuid4().hex,
            enabled=settings.audit_enabled if audit_enabled is None else audit_enabled,
        )

    @property
    def triggers(self) -> tuple[TriggerConfig, ...]:
        return self._triggers

    @property
    def active_trigger(self) -> str | None:
        return self._state.active_trigger

    @property
    def current_query(self) -> str:
        return self._state.current_query

    @property
    def target_range(self) -> TargetRange | None:
        return self._state.target_range

    @property
    def is_mentioning(self) -> bool:
        return self._state.is_mentioning

    @property
    def mentions(self) -> list[MentionSpan]:
        """Snapshot of the reconciled spans, sorted by start."""
        return self._store.spans

    @property
    def custom_data(self) -> Mapping[str, Mapping[str, Any]]:
        return self._store.custom_data

    @property
    def is_inserting(self) -> bool:
        """True while a commit is propagating back through the host."""
        return self._inserting

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> MentionSnapshot:
        """Consumer-facing read view of the session."""
        return MentionSnapshot(
            active_trigger=self._state.active_trigger,
            current_query=self._state.current_query,
            is_mentioning=self._state.is_mentioning,
            mentions=tuple(self._store.spans),
        )

    def register_host(self, host: TextHost | None) -> None:
        """Attach (or detach with None) the text surface commits write into."""
        self._ensure_open("register_host")
        self._host = host

    def on_text_or_selection_change(
        self,
        text: str,
        selection_start: int,
        selection_end: int | None = None,
    ) -> None:
        """Handle a text or cursor change from the host.

        Args:
            text: The full current text.
            selection_start: Selection start offset.
            selection_end: Selection end offset; same as start for a caret.
        """
        self._ensure_open("on_text_or_selection_change")
        if self._inserting:
            logger.debug("Ignoring host update while a commit is in flight")
            return

        if selection_end is None:
            selection_end = selection_start

        self._reconcile(text)

        if selection_start != selection_end:
            self._clear_trigger("selection")
            return

        match = detect_trigger(text, selection_start, self._triggers, self._lookback_limit)
        if match is None:
            self._clear_trigger("no_match")
            return

        if self._state.active_trigger != match.trigger:
            self._audit.log_trigger_activated(match.trigger, match.query)
        self._state.activate(match.trigger, match.query, TargetRange(match.start, match.end))

    def commit_mention(self, suggestion: MentionSuggestion | Mapping[str, Any]) -> bool:
        """Replace the live trigger range with the selected suggestion.

        The text becomes ``before + symbol + name + " " + after``. A span
        covering ``symbol + name`` is recorded, any ``suggestion.data`` is
        stored under the ``symbol + name`` key, and the session returns to
        IDLE.

        Args:
            suggestion: The suggestion picked by the user.

        Returns:
            True if committed; False if no trigger is active or no host is
            registered (a no-op, never an error).
        """
        self._ensure_open("commit_mention")
        if not isinstance(suggestion, MentionSuggestion):
            suggestion = MentionSuggestion.model_validate(suggestion)

        host = self._host
        trigger = self._state.active_trigger
        target = self._state.target_range
        if trigger is None or target is None:
            logger.debug("Commit ignored: no active trigger")
            self._audit.log_commit_ignored("no_trigger")
            return False
        if host is None:
            logger.debug("Commit ignored: no text host registered")
            self._audit.log_commit_ignored("no_host")
            return False

        value = host.current_value
        label = f"{trigger}{suggestion.name}"
        new_value = f"{value[: target.start]}{label} {value[target.end :]}"
        delta = len(new_value) - len(value)

        payload = dict(suggestion.data or {})
        span = MentionSpan(
            start=target.start,
            end=target.start + len(label),
            data=MentionData.model_validate(
                {**payload, "id": suggestion.id, "name": suggestion.name, "symbol": trigger}
            ),
        )
        if payload:
            self._store.put_custom_data(trigger, suggestion.name, payload)

        self._inserting = True
        self._state.clear()
        self._audit.log_trigger_cleared(trigger, "committed")

        host.replace_value(new_value)
        self._scheduler(self._end_insert)
        host.request_focus()

        self._reconcile(
            new_value,
            edit=(target.start, target.end, delta),
            extra_spans=[span],
        )

        logger.info("Committed mention %s (id=%s)", label, suggestion.id)
        self._audit.log_mention_committed(trigger, suggestion.name, suggestion.id, bool(payload))
        return True

    def close(self) -> None:
        """End the session. Further session-level calls raise MentionSessionError."""
        if self._closed:
            return
        self._audit.log_session_closed(len(self._store.spans))
        self._closed = True
        self._host = None
        self._state.clear()

    def _end_insert(self) -> None:
        self._inserting = False

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise MentionSessionError(f"{operation} called on a closed mention session")

    def _clear_trigger(self, reason: str) -> None:
        if self._state.active_trigger is not None:
            self._audit.log_trigger_cleared(self._state.active_trigger, reason)
        self._state.clear()

    def _reconcile(
        self,
        text: str,
        edit: tuple[int, int, int] | None = None,
        extra_spans: list[MentionSpan] | None = None,
    ) -> None:
        before = self._store.spans
        if edit is None:
            spans = self._store.update(text, extra_spans or ())
        else:
            spans = self._store.apply_edit(text, *edit, extra_spans=extra_spans or ())

        self._audit.log_spans_dropped(self._store.last_dropped)
        self._audit.log_custom_data_collected(self._store.last_collected)

        if spans != before and self._on_mentions_change is not None:
            self._on_mentions_change(list(spans))


def require_session(session: MentionSession | None) -> MentionSession:
    """Return the injected session, failing loudly if there is none.

    Collaborators (input bindings, suggestion lists) receive the session by
    reference; a missing or closed one is a wiring bug.

    Raises:
        MentionSessionError: If ``session`` is None or closed.
    """
    if session is None:
        raise MentionSessionError("No mention session was provided")
    if session.closed:
        raise MentionSessionError("Mention session is closed")
    return session
