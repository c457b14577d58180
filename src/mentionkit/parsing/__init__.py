"""Parsing module: span parser and trigger detector."""

from mentionkit.parsing.detector import DEFAULT_LOOKBACK_LIMIT, TriggerMatch, detect_trigger
from mentionkit.parsing.parser import (
    find_mention_at_cursor,
    mention_pattern,
    parse_mentions,
    strip_mentions,
)

__all__ = [
    "DEFAULT_LOOKBACK_LIMIT",
    "TriggerMatch",
    "detect_trigger",
    "find_mention_at_cursor",
    "mention_pattern",
    "parse_mentions",
    "strip_mentions",
]
