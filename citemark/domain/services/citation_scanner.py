"""
Citation Scanner.

Finds bracketed source identifiers in assistant text and splits the text into
prose and citation segments with sequential display numbers.

Marker grammar (hex digits are case-insensitive):

    "[" hex{8} "-" hex{4} "-" hex{4} "-" hex{4} "-" hex{12} "]"

Scanning is a single left-to-right pass of a small finite automaton: a
plain-text state, plus one state per position of the marker template. A
mismatch inside a candidate marker drops back to the plain-text state at the
failing character, so "[" can open a new candidate immediately.
"""
import logging
from typing import Iterator, List, Tuple

from citemark.domain.models.citation import CitationRecord, ScanResult, Segment

logger = logging.getLogger(__name__)

# "h" stands for one hexadecimal digit, every other character is literal
MARKER_TEMPLATE = "[" + "-".join("h" * width for width in (8, 4, 4, 4, 12)) + "]"
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_PLAIN = 0


def _accepts(expected: str, char: str) -> bool:
    if expected == "h":
        return char in HEX_DIGITS
    return char == expected


def iter_markers(text: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (start, end) offsets of every citation marker in text.

    Matches are non-overlapping and reported in document order; end is
    exclusive and includes the closing bracket.
    """
    state = _PLAIN
    start = 0
    i = 0
    length = len(text)

    while i < length:
        char = text[i]

        if state == _PLAIN:
            if char == "[":
                start = i
                state = 1
            i += 1
            continue

        if _accepts(MARKER_TEMPLATE[state], char):
            state += 1
            i += 1
            if state == len(MARKER_TEMPLATE):
                yield start, i
                state = _PLAIN
            continue

        # Re-read the failing character as plain text (it may be a new "[")
        state = _PLAIN


def scan(text: str) -> ScanResult:
    """
    Split text into prose and citation segments.

    Args:
        text: Raw message text

    Returns:
        ScanResult with ordered segments, one CitationRecord per marker
        (display numbers 1..k) and the distinct source ids in order of first
        appearance.
    """
    segments: List[Segment] = []
    citations: List[CitationRecord] = []
    source_ids: List[str] = []
    last_end = 0

    for display_number, (start, end) in enumerate(iter_markers(text), start=1):
        if start > last_end:
            segments.append(Segment(text=text[last_end:start]))

        source_id = text[start + 1:end - 1]
        citations.append(CitationRecord(
            display_number=display_number,
            source_id=source_id,
            chunk_index=display_number - 1
        ))
        if source_id not in source_ids:
            source_ids.append(source_id)

        segments.append(Segment(
            text=f"[{display_number}]",
            citation_number=display_number,
            source_id=source_id
        ))
        last_end = end

    if last_end < len(text):
        segments.append(Segment(text=text[last_end:]))

    if not segments:
        segments.append(Segment(text=text))

    logger.debug(
        "Scanned %d chars: %d segments, %d citations, %d sources",
        len(text), len(segments), len(citations), len(source_ids)
    )
    return ScanResult(segments=segments, citations=citations, source_ids=source_ids)


def has_markers(text: str) -> bool:
    """Check whether text contains at least one citation marker."""
    return next(iter_markers(text), None) is not None
