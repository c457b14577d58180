"""Session state dataclasses for the mention controller."""

from dataclasses import dataclass, field

from mentionkit.models import MentionSpan


@dataclass(frozen=True)
class TargetRange:
    """Text range (trigger symbol through cursor) replaced on commit."""

    start: int
    end: int


@dataclass
class SessionState:
    """Cursor-driven trigger state.

    IDLE when ``active_trigger`` is None, MATCHING otherwise. ``target_range``
    is set exactly when a trigger is active.
    """

    active_trigger: str | None = None
    current_query: str = ""
    target_range: TargetRange | None = None

    @property
    def is_mentioning(self) -> bool:
        return self.active_trigger is not None

    def activate(self, trigger: str, query: str, target_range: TargetRange) -> None:
        """Enter (or stay in) MATCHING with an updated query."""
        self.active_trigger = trigger
        self.current_query = query
        self.target_range = target_range

    def clear(self) -> None:
        """Return to IDLE."""
        self.active_trigger = None
        self.current_query = ""
        self.target_range = None


@dataclass(frozen=True)
class MentionSnapshot:
    """Read-only view of a session handed to consumers."""

    active_trigger: str | None
    current_query: str
    is_mentioning: bool
    mentions: tuple[MentionSpan, ...] = field(default_factory=tuple)
