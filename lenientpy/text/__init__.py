"""Text offsets, ranges and line/column lookup."""

from lenientpy.text.text import LineIndex, TextRange, TextSize

__all__ = [
    "LineIndex",
    "TextRange",
    "TextSize",
]
