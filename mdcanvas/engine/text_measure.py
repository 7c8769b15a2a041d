"""
text_measure.py — Estimate text extents BEFORE placing elements.

Heights are estimated from character counts and an average glyph width; no
font files are loaded. The planner calls
estimate_text_height() for every text-bearing block.
"""

import math
import re
import textwrap

from .units import (
    GLYPH_WIDTH_FACTOR,
    LINE_HEIGHT_FACTOR,
    MIN_TEXT_HEIGHT,
    TABLE_EXTRA_HEIGHT,
    TABLE_HEADER_HEIGHT,
    TABLE_ROW_HEIGHT,
    TEXT_PADDING_BONUS,
    TEXT_PADDING_BONUS_SMALL,
    pick_band,
)

# =============================================================================
# MARKDOWN CLEANING
# =============================================================================

# Order matters: double markers before single ones
_INLINE_PATTERNS = [
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"__(.*?)__"), r"\1"),
    (re.compile(r"_(.*?)_"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
]


def clean_markdown_text(text: str) -> str:
    """Strip emphasis, inline code and link markers from inline markdown."""
    for pattern, replacement in _INLINE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text.strip()


def has_bold_markers(text: str) -> bool:
    """Whether raw inline markdown contains bold emphasis."""
    return "**" in text or "__" in text


# =============================================================================
# HEIGHT ESTIMATION
# =============================================================================

def chars_per_line(font_size: float, content_width: float) -> int:
    """Estimated characters per line for an average glyph width of 0.6em."""
    glyph_width = GLYPH_WIDTH_FACTOR * font_size
    if glyph_width <= 0:
        return 1
    return max(1, int(content_width // glyph_width))


def estimate_line_count(text: str, font_size: float, content_width: float) -> int:
    """
    Estimate rendered line count.

    The larger of the explicit line count and the wrapped line count for the
    whole character run.
    """
    explicit = len(text.split("\n"))
    wrapped = math.ceil(len(text) / chars_per_line(font_size, content_width))
    return max(explicit, wrapped)


def padding_bonus(font_size: float) -> float:
    """Extra vertical room; large type gets more."""
    return pick_band(font_size, TEXT_PADDING_BONUS, TEXT_PADDING_BONUS_SMALL)


def estimate_text_height(text: str, font_size: float, content_width: float) -> float:
    """
    Estimate the box height for a run of text.

    Args:
        text: Text as it will be displayed (newlines are hard breaks)
        font_size: Font size in pixels
        content_width: Available column width in pixels

    Returns:
        Height in pixels, never below MIN_TEXT_HEIGHT
    """
    lines = estimate_line_count(text, font_size, content_width)
    height = lines * font_size * LINE_HEIGHT_FACTOR + padding_bonus(font_size)
    return max(height, MIN_TEXT_HEIGHT)


# =============================================================================
# TABLES
# =============================================================================

def format_table_content(header_cells: list[str], rows: list[list[str]]) -> str:
    """Serialize a table to pipe-delimited text with a rule under the header."""
    lines = [
        " | ".join(header_cells),
        " | ".join("---" for _ in header_cells),
    ]
    lines.extend(" | ".join(row) for row in rows)
    return "\n".join(lines).strip()


def estimate_table_height(row_count: int) -> float:
    """Table height from row count alone."""
    return TABLE_HEADER_HEIGHT + row_count * TABLE_ROW_HEIGHT + TABLE_EXTRA_HEIGHT


# =============================================================================
# LINE BREAKING (for renderers)
# =============================================================================

def wrap_lines(text: str, font_size: float, box_width: float) -> list[str]:
    """Break text into display lines using the same glyph-width estimate."""
    width = chars_per_line(font_size, box_width)
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(textwrap.wrap(paragraph, width=width, break_long_words=True) or [""])
    return lines
