"""
Inline Formatter.

Expands the light markdown subset used in chat messages into styled runs:
bold spans (**text** or __text__) and line breaks.
"""
from typing import List, Optional, Tuple

from citemark.domain.models.render import (
    FormatMode,
    LineBreak,
    RenderInstruction,
    TextRun,
)

BOLD_DELIMITERS = ("**", "__")


def _bold_close(text: str, pos: int) -> Optional[Tuple[int, int]]:
    """
    Find the bold span opening at pos.

    Returns (content_end, span_end) for the nearest closing delimiter on the
    same line, or None if no bold span opens here.
    """
    for delimiter in BOLD_DELIMITERS:
        if not text.startswith(delimiter, pos):
            continue
        line_end = text.find("\n", pos)
        if line_end == -1:
            line_end = len(text)
        close = text.find(delimiter, pos + len(delimiter), line_end)
        if close == -1:
            return None
        return close, close + len(delimiter)
    return None


def split_bold(text: str) -> List[Tuple[str, bool]]:
    """
    Split text into (text, is_bold) parts.

    Bold spans are matched non-greedily, left to right, and never cross a line
    break. Delimiters without a partner stay in the plain text. Empty parts are
    dropped.
    """
    parts: List[Tuple[str, bool]] = []
    plain_start = 0
    pos = 0

    while pos < len(text):
        span = _bold_close(text, pos)
        if span is None:
            pos += 1
            continue
        content_end, span_end = span
        parts.append((text[plain_start:pos], False))
        parts.append((text[pos + 2:content_end], True))
        pos = plain_start = span_end

    parts.append((text[plain_start:], False))
    return [(part, bold) for part, bold in parts if part]


def format_text(text: str, mode: FormatMode = FormatMode.BLOCK) -> List[RenderInstruction]:
    """
    Format a text run into render instructions.

    Args:
        text: Text run, possibly multi-line
        mode: BLOCK keeps line breaks as LineBreak instructions between lines,
            INLINE collapses every line break in plain text into a single space

    Returns:
        Ordered list of TextRun and LineBreak instructions
    """
    text = text.replace("\r\n", "\n")

    if mode == FormatMode.INLINE:
        return [
            TextRun(text=part if bold else part.replace("\n", " "), bold=bold)
            for part, bold in split_bold(text)
        ]

    instructions: List[RenderInstruction] = []
    lines = text.split("\n")
    for index, line in enumerate(lines):
        instructions.extend(TextRun(text=part, bold=bold) for part, bold in split_bold(line))
        if index < len(lines) - 1:
            instructions.append(LineBreak())
    return instructions
