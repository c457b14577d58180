"""Session management: mention store, scheduler and controller."""

from mentionkit.session.controller import (
    MentionSession,
    MentionSessionError,
    TextHost,
    require_session,
)
from mentionkit.session.scheduler import DeferredQueue, Scheduler, call_soon, run_pending
from mentionkit.session.state import MentionSnapshot, SessionState, TargetRange
from mentionkit.session.store import (
    MentionStore,
    edit_bounds,
    rebase_across_diff,
    rebase_spans,
    reconcile,
)

__all__ = [
    "DeferredQueue",
    "MentionSession",
    "MentionSessionError",
    "MentionSnapshot",
    "MentionStore",
    "Scheduler",
    "SessionState",
    "TargetRange",
    "TextHost",
    "call_soon",
    "edit_bounds",
    "rebase_across_diff",
    "rebase_spans",
    "reconcile",
    "run_pending",
    "require_session",
]
