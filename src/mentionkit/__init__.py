"""Mention tagging engine: trigger detection, span parsing and reconciliation."""

__version__ = "0.1.0"

from mentionkit.config import TriggerConfig, TriggersConfig
from mentionkit.models import MentionData, MentionSpan, MentionSuggestion
from mentionkit.parsing import detect_trigger, find_mention_at_cursor, parse_mentions
from mentionkit.rendering import Segment, split_segments
from mentionkit.session import MentionSession, MentionSessionError, MentionStore

__all__ = [
    "MentionData",
    "MentionSession",
    "MentionSessionError",
    "MentionSpan",
    "MentionStore",
    "MentionSuggestion",
    "Segment",
    "TriggerConfig",
    "TriggersConfig",
    "__version__",
    "detect_trigger",
    "find_mention_at_cursor",
    "parse_mentions",
    "split_segments",
]
