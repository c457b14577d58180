"""Mention data models.

MentionData and MentionSuggestion are pydantic models because they carry
host-supplied payloads that need validation. MentionSpan is a plain frozen
dataclass: it is created on every keystroke and only ever holds offsets
plus a MentionData.
"""

from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Fields that make up a mention's key; custom payloads never replace them.
IDENTITY_FIELDS = frozenset({"name", "symbol"})


def mention_key(symbol: str, name: str) -> str:
    """Build the custom data store key for a mention."""
    return f"{symbol}{name}"


class MentionData(BaseModel):
    """Data attached to a committed mention.

    ``id``, ``name`` and ``symbol`` are required. Any other keyword becomes an
    opaque extra field that is carried through reconciliation untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    name: str
    symbol: str

    @property
    def key(self) -> str:
        """Custom data store key (symbol + name)."""
        return mention_key(self.symbol, self.name)

    @property
    def extra(self) -> dict[str, Any]:
        """The extra payload fields, without id/name/symbol."""
        return dict(self.model_extra or {})

    def merged(self, payload: dict[str, Any]) -> "MentionData":
        """Return a copy with ``payload`` layered over the current fields.

        ``name`` and ``symbol`` in the payload are ignored so the mention
        keeps its key; ``id`` may be overridden.
        """
        layered = {k: v for k, v in payload.items() if k not in IDENTITY_FIELDS}
        return MentionData.model_validate({**self.model_dump(), **layered})


class MentionSuggestion(BaseModel):
    """A candidate offered by the host application for the active trigger."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    symbol: str
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class MentionSpan:
    """A mention anchored at ``[start, end)`` in the text it was derived from."""

    start: int
    end: int
    data: MentionData

    @property
    def key(self) -> str:
        return self.data.key

    @property
    def label(self) -> str:
        """The exact text this span must cover (symbol + name)."""
        return self.data.key

    def is_within(self, length: int) -> bool:
        """Check the span indexes a valid, non-empty range of a text of ``length``."""
        return 0 <= self.start < self.end <= length

    def overlaps(self, other: "MentionSpan") -> bool:
        return self.start < other.end and other.start < self.end

    def shifted(self, delta: int) -> "MentionSpan":
        if delta == 0:
            return self
        return replace(self, start=self.start + delta, end=self.end + delta)
