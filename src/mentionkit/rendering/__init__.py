"""Rendering helpers for displaying mention-annotated text."""

from mentionkit.rendering.segments import Segment, split_segments

__all__ = ["Segment", "split_segments"]
