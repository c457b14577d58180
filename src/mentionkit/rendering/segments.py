"""Split text into plain and mention segments for display."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from mentionkit.config import TriggersLike, coerce_triggers
from mentionkit.models import MentionData, MentionSpan
from mentionkit.parsing import parse_mentions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    """A run of text, either plain or a single mention."""

    text: str
    mention: MentionData | None = None

    @property
    def is_mention(self) -> bool:
        return self.mention is not None


def split_segments(
    text: str,
    spans: Iterable[MentionSpan] | None,
    triggers: TriggersLike = (),
) -> list[Segment]:
    """Split ``text`` into ordered segments using ``spans``.

    Spans outside the text or with ``start >= end`` are skipped, as are spans
    overlapping an earlier one. When ``spans`` is None the text is parsed
    with ``triggers``. Mentions of triggers configured with
    ``hide_symbol_in_display`` lose their leading symbol.

    Args:
        text: The raw text.
        spans: Mention spans indexing ``text``, or None to parse.
        triggers: The trigger set.

    Returns:
        Segments whose texts, with hidden symbols restored, join back to ``text``.
    """
    configs = {trigger.symbol: trigger for trigger in coerce_triggers(triggers)}
    if spans is None:
        spans = parse_mentions(text, configs.values())

    valid = sorted(
        (span for span in spans if span.is_within(len(text))),
        key=lambda span: (span.start, span.end),
    )

    segments: list[Segment] = []
    last = 0
    skipped = 0
    for span in valid:
        if span.start < last:
            skipped += 1
            continue
        if span.start > last:
            segments.append(Segment(text[last : span.start]))

        content = text[span.start : span.end]
        config = configs.get(span.data.symbol)
        if config is not None and config.hide_symbol_in_display:
            content = content.removeprefix(span.data.symbol)
        segments.append(Segment(content, span.data))
        last = span.end

    if last < len(text):
        segments.append(Segment(text[last:]))

    if skipped:
        logger.debug("Skipped %d overlapping mention spans", skipped)
    return segments
