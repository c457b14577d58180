"""Mention store: keeps committed spans anchored across text edits."""

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from types import MappingProxyType
from typing import Any

from mentionkit.config import TriggersLike, coerce_triggers
from mentionkit.models import MentionSpan, mention_key
from mentionkit.parsing import parse_mentions

logger = logging.getLogger(__name__)


def _span_survives(span: MentionSpan, text: str) -> bool:
    return span.is_within(len(text)) and text[span.start : span.end] == span.label


def edit_bounds(old_text: str, new_text: str, suffix_first: bool = False) -> tuple[int, int, int]:
    """Locate the single contiguous edit turning ``old_text`` into ``new_text``.

    Repeated characters make the edit position ambiguous: by default the
    common prefix is matched first (the edit sits as far right as possible);
    with ``suffix_first`` the common suffix is (as far left as possible).

    Returns:
        ``(start, old_end, new_end)``: the edit replaced ``old_text[start:old_end]``
        with ``new_text[start:new_end]``.
    """
    limit = min(len(old_text), len(new_text))

    def common_prefix(cap: int) -> int:
        n = 0
        while n < cap and old_text[n] == new_text[n]:
            n += 1
        return n

    def common_suffix(cap: int) -> int:
        n = 0
        while n < cap and old_text[len(old_text) - 1 - n] == new_text[len(new_text) - 1 - n]:
            n += 1
        return n

    if suffix_first:
        suffix = common_suffix(limit)
        prefix = common_prefix(limit - suffix)
    else:
        prefix = common_prefix(limit)
        suffix = common_suffix(limit - prefix)

    return prefix, len(old_text) - suffix, len(new_text) - suffix


def _rebase_one(span: MentionSpan, edit_start: int, edit_end: int, delta: int) -> MentionSpan | None:
    if span.end <= edit_start:
        return span
    if span.start >= edit_end:
        return span.shifted(delta)
    return None


def rebase_spans(
    spans: Iterable[MentionSpan],
    edit_start: int,
    edit_end: int,
    delta: int,
) -> list[MentionSpan]:
    """Move spans across an edit that replaced ``[edit_start, edit_end)``.

    Spans entirely before the edit are unchanged and spans entirely after it
    shift by ``delta``. Spans the edit touches are dropped.
    """
    rebased: list[MentionSpan] = []
    for span in spans:
        moved = _rebase_one(span, edit_start, edit_end, delta)
        if moved is None:
            logger.debug("Edit at [%d, %d) invalidated %s", edit_start, edit_end, span.label)
            continue
        rebased.append(moved)
    return rebased


def rebase_across_diff(spans: Iterable[MentionSpan], old_text: str, new_text: str) -> list[MentionSpan]:
    """Rebase spans from ``old_text`` to ``new_text`` offsets.

    Both readings of an ambiguous edit are tried; a span is kept if either
    leaves it untouched.
    """
    if old_text == new_text:
        return list(spans)

    readings = []
    for suffix_first in (False, True):
        start, old_end, new_end = edit_bounds(old_text, new_text, suffix_first)
        readings.append((start, old_end, new_end - old_end))

    rebased: list[MentionSpan] = []
    for span in spans:
        for reading in readings:
            moved = _rebase_one(span, *reading)
            if moved is not None:
                rebased.append(moved)
                break
        else:
            logger.debug("Edit invalidated %s", span.label)
    return rebased


def reconcile(
    previous_spans: Iterable[MentionSpan],
    custom_data: MutableMapping[str, Mapping[str, Any]],
    text: str,
    triggers: TriggersLike,
) -> list[MentionSpan]:
    """Reconcile previously committed spans with a new text buffer.

    1. Keep each previous span whose offsets are in bounds and whose covered
       text equals its symbol + name exactly.
    2. Parse the full text.
    3. Merge by ``(start, end)``: surviving spans win; parsed spans fill
       free keys, enriched with the custom data entry for their key.
    4. Sort by start.
    5. Drop custom data entries no longer referenced by any span.

    Spans at different keys may overlap (``@John`` kept while ``@Johnny`` is
    parsed); renderers pick among them. ``custom_data`` is updated in place.
    Never raises for bad spans; they are dropped.

    Returns:
        The reconciled spans, sorted by start.
    """
    previous = list(previous_spans)
    survivors = [span for span in previous if _span_survives(span, text)]
    if len(survivors) != len(previous):
        logger.debug("Dropped %d stale mention spans", len(previous) - len(survivors))

    # Later duplicates win so a freshly committed span replaces a stale one.
    merged: dict[tuple[int, int], MentionSpan] = {(s.start, s.end): s for s in survivors}

    for parsed in parse_mentions(text, coerce_triggers(triggers)):
        if (parsed.start, parsed.end) in merged:
            continue
        payload = custom_data.get(parsed.key)
        if payload:
            parsed = MentionSpan(parsed.start, parsed.end, parsed.data.merged(dict(payload)))
        merged[(parsed.start, parsed.end)] = parsed

    result = sorted(merged.values(), key=lambda span: (span.start, span.end))

    live_keys = {span.key for span in result}
    orphaned = [key for key in custom_data if key not in live_keys]
    for key in orphaned:
        del custom_data[key]
    if orphaned:
        logger.debug("Collected custom data for %d unused mentions", len(orphaned))

    return result


class MentionStore:
    """Owns the committed span list and the custom data store.

    Custom data is keyed by symbol + name and holds extra payload that
    cannot be recovered from text alone. Entries live as long as some span
    uses their key.
    """

    def __init__(self, triggers: TriggersLike) -> None:
        """Initialize the store.

        Args:
            triggers: The trigger set used for parsing.
        """
        self._triggers = coerce_triggers(triggers)
        self._spans: list[MentionSpan] = []
        self._custom_data: dict[str, dict[str, Any]] = {}
        self._text = ""
        self._last_dropped = 0
        self._last_collected: list[str] = []

    @property
    def text(self) -> str:
        """The text the current spans index."""
        return self._text

    @property
    def spans(self) -> list[MentionSpan]:
        """Snapshot of the reconciled spans."""
        return list(self._spans)

    @property
    def custom_data(self) -> Mapping[str, Mapping[str, Any]]:
        """Read-only view of the custom data store."""
        return MappingProxyType(self._custom_data)

    @property
    def last_dropped(self) -> int:
        """Number of previous spans the last reconciliation discarded."""
        return self._last_dropped

    @property
    def last_collected(self) -> list[str]:
        """Custom data keys the last reconciliation garbage-collected."""
        return list(self._last_collected)

    def put_custom_data(self, symbol: str, name: str, payload: Mapping[str, Any]) -> None:
        """Store (or overwrite) the payload for a mention key."""
        self._custom_data[mention_key(symbol, name)] = dict(payload)

    def update(self, text: str, extra_spans: Iterable[MentionSpan] = ()) -> list[MentionSpan]:
        """Reconcile against ``text``, rebasing spans across the edit first.

        Args:
            text: The new text buffer.
            extra_spans: Spans already expressed in ``text`` offsets to fold in.

        Returns:
            The reconciled spans.
        """
        rebased = rebase_across_diff(self._spans, self._text, text)
        return self._reconcile(text, rebased, extra_spans)

    def apply_edit(
        self,
        text: str,
        edit_start: int,
        edit_end: int,
        delta: int,
        extra_spans: Iterable[MentionSpan] = (),
    ) -> list[MentionSpan]:
        """Reconcile against ``text`` after a known edit of ``[edit_start, edit_end)``.

        Args:
            text: The new text buffer.
            edit_start: Start of the replaced range, in old text offsets.
            edit_end: End of the replaced range, in old text offsets.
            delta: Length change caused by the edit.
            extra_spans: Spans already expressed in ``text`` offsets to fold in.

        Returns:
            The reconciled spans.
        """
        rebased = rebase_spans(self._spans, edit_start, edit_end, delta)
        return self._reconcile(text, rebased, extra_spans)

    def reset(self) -> None:
        """Forget all spans, custom data and text."""
        self._spans = []
        self._custom_data.clear()
        self._text = ""
        self._last_dropped = 0
        self._last_collected = []

    def _reconcile(
        self,
        text: str,
        rebased: list[MentionSpan],
        extra_spans: Iterable[MentionSpan],
    ) -> list[MentionSpan]:
        previous_count = len(self._spans)
        keys_before = set(self._custom_data)

        self._spans = reconcile([*rebased, *extra_spans], self._custom_data, text, self._triggers)
        self._text = text

        kept = [span for span in rebased if span in self._spans]
        self._last_dropped = previous_count - len(kept)
        self._last_collected = sorted(keys_before - set(self._custom_data))
        return list(self._spans)
