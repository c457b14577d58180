"""Tests for display segment splitting."""

from mentionkit.config import TriggerConfig
from mentionkit.models import MentionData, MentionSpan
from mentionkit.parsing import parse_mentions
from mentionkit.rendering import Segment, split_segments

AT = TriggerConfig(symbol="@")
HASH = TriggerConfig(symbol="#", hide_symbol_in_display=True)


class TestSplitSegments:
    """Tests for split_segments function."""

    def test_plain_and_mentions(self):
        """Test text is split around mentions."""
        text = "Hi @John, see #rust!"
        segments = split_segments(text, parse_mentions(text, [AT]), [AT])

        assert [s.text for s in segments] == ["Hi ", "@John", ", see #rust!"]
        assert segments[1].is_mention
        assert segments[1].mention.name == "John"
        assert not segments[0].is_mention

    def test_hide_symbol(self):
        """Test hidden trigger symbols are removed from display text."""
        text = "about #rust today"
        segments = split_segments(text, None, [AT, HASH])
        assert [s.text for s in segments] == ["about ", "rust", " today"]

    def test_parses_when_spans_missing(self):
        """Test spans are parsed when none are given."""
        segments = split_segments("@a", None, [AT])
        assert segments == [Segment("@a", MentionData(id="@a", name="a", symbol="@"))]

    def test_out_of_bounds_spans_discarded(self):
        """Test invalid spans never break rendering."""
        data = MentionData(id="x", name="John", symbol="@")
        spans = [MentionSpan(-1, 3, data), MentionSpan(2, 99, data), MentionSpan(4, 2, data)]
        segments = split_segments("hello", spans, [AT])
        assert segments == [Segment("hello")]

    def test_overlapping_spans_skipped(self):
        """Test a span overlapping an earlier one is skipped."""
        data = MentionData(id="x", name="ab", symbol="@")
        spans = [MentionSpan(0, 3, data), MentionSpan(1, 3, data)]
        segments = split_segments("@ab c", spans, [AT])
        assert [s.text for s in segments] == ["@ab", " c"]

    def test_empty_text(self):
        """Test empty text gives no segments."""
        assert split_segments("", [], [AT]) == []
