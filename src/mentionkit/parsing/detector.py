"""Trigger detector: find the live trigger and query near the cursor."""

import logging
import re
from dataclasses import dataclass

from mentionkit.config import TriggersLike, coerce_triggers

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_LIMIT = 50

# Characters allowed in an in-progress query. Same word class as the parser,
# so "@Jane." stops being a live mention as soon as the "." is typed.
QUERY_PATTERN = re.compile(r"[\w\s-]*", re.ASCII)


@dataclass(frozen=True)
class TriggerMatch:
    """A live trigger found before the cursor."""

    trigger: str
    start: int
    end: int
    query: str


def _can_precede_trigger(char: str | None) -> bool:
    return char is None or char.isspace() or char == "("


def detect_trigger(
    text: str,
    cursor: int,
    triggers: TriggersLike,
    lookback_limit: int = DEFAULT_LOOKBACK_LIMIT,
) -> TriggerMatch | None:
    """Detect the active trigger for a caret at ``cursor``.

    Only the last ``lookback_limit`` characters before the cursor are
    searched, so the cost does not grow with the document. For each trigger
    the last occurrence of its symbol in that window is a candidate when it
    sits at the start of the text or right after whitespace or ``(``. The
    query (symbol to cursor) must stay on one line, use only word
    characters, hyphens and whitespace, and hold at most
    ``max_extra_words`` words after the first. Leading and trailing spaces
    do not start a new word, so ``"@John "`` is still live.
    Among valid candidates the one closest to the cursor wins.

    Examples:
        ("Hello @John", 11) -> TriggerMatch("@", start=6, end=11, query="John")
        ("Hello @John!", 12) -> None
        ("#topic and @us", 14) -> TriggerMatch("@", ..., query="us")

    Args:
        text: The full text.
        cursor: Caret offset into ``text``.
        triggers: The trigger set.
        lookback_limit: Size of the window searched before the cursor.

    Returns:
        The best TriggerMatch, or None when no trigger is live.
    """
    if cursor < 0 or cursor > len(text):
        return None

    window_start = max(0, cursor - lookback_limit)
    window = text[window_start:cursor]

    best: TriggerMatch | None = None
    for trigger in coerce_triggers(triggers):
        index = window.rfind(trigger.symbol)
        if index == -1:
            continue

        start = window_start + index
        previous = text[start - 1] if start > 0 else None
        if not _can_precede_trigger(previous):
            continue

        query = window[index + len(trigger.symbol) :]
        if "\n" in query or not QUERY_PATTERN.fullmatch(query):
            continue

        extra_words = max(0, len(query.split()) - 1)
        if extra_words > trigger.max_extra_words:
            continue

        if best is None or start > best.start:
            best = TriggerMatch(trigger=trigger.symbol, start=start, end=cursor, query=query)

    if best is not None:
        logger.debug("Live trigger %s at %d (query=%r)", best.trigger, best.start, best.query)
    return best
