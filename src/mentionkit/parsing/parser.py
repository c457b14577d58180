"""Span parser: extract mention spans from raw text by pattern matching."""

import logging
import re
from functools import lru_cache

from mentionkit.config import TriggerConfig, TriggersLike, coerce_triggers
from mentionkit.models import MentionData, MentionSpan

logger = logging.getLogger(__name__)

# A name is one word of word characters or hyphens, optionally followed by
# up to N more words separated by horizontal whitespace. Newlines never
# belong to a name.
NAME_WORD = r"[\w-]+"
WORD_SEPARATOR = r"[^\S\r\n]+"


@lru_cache(maxsize=64)
def mention_pattern(symbol: str, max_extra_words: int = 0) -> re.Pattern[str]:
    """Compile the pattern matching ``symbol`` followed by a name.

    Group 1 captures the name. ASCII matching keeps word boundaries to
    ``[A-Za-z0-9_]``.
    """
    return re.compile(
        rf"{re.escape(symbol)}({NAME_WORD}(?:{WORD_SEPARATOR}{NAME_WORD}){{0,{max_extra_words}}})",
        re.ASCII,
    )


def _pattern_for(trigger: TriggerConfig) -> re.Pattern[str]:
    return mention_pattern(trigger.symbol, trigger.max_extra_words)


def parse_mentions(text: str, triggers: TriggersLike) -> list[MentionSpan]:
    """Parse every mention in ``text`` for the given triggers.

    Matches are non-overlapping per trigger, scanned left to right. Results
    from all triggers are pooled and sorted by start offset. The ``id`` of
    each span defaults to the full matched text; hosts usually overwrite it.

    Examples:
        "Hey @John, check #react" -> [@John (4, 9), #react (17, 23)]
        "Hello @Mary Smith Jones" (max_extra_words=2) -> [@Mary Smith Jones]

    Args:
        text: The text to scan.
        triggers: The trigger set.

    Returns:
        Spans sorted by ``start``. Empty for empty text.
    """
    if not text:
        return []

    spans: list[MentionSpan] = []
    for trigger in coerce_triggers(triggers):
        for match in _pattern_for(trigger).finditer(text):
            spans.append(
                MentionSpan(
                    start=match.start(),
                    end=match.end(),
                    data=MentionData(
                        id=match.group(0),
                        name=match.group(1),
                        symbol=trigger.symbol,
                    ),
                )
            )

    spans.sort(key=lambda span: span.start)
    logger.debug("Parsed %d mention spans from %d chars", len(spans), len(text))
    return spans


def find_mention_at_cursor(cursor: int, spans: list[MentionSpan]) -> MentionSpan | None:
    """Return the first span whose range contains the cursor (ends inclusive)."""
    for span in spans:
        if span.start <= cursor <= span.end:
            return span
    return None


def strip_mentions(text: str, triggers: TriggersLike) -> str:
    """Remove all mentions from ``text`` and normalize whitespace.

    Examples:
        "@john please look at #infra today" -> "please look at today"
    """
    if not text:
        return text

    pieces: list[str] = []
    last = 0
    for span in parse_mentions(text, triggers):
        if span.start < last:
            # Overlaps a span from another trigger that was already removed
            continue
        pieces.append(text[last : span.start])
        last = span.end
    pieces.append(text[last:])
    return " ".join("".join(pieces).split())
