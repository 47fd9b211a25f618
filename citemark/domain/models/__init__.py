"""
Domain models for parsed and rendered chat messages.
"""
from citemark.domain.models.citation import (
    Segment,
    CitationRecord,
    SourceMetadata,
    ScanResult,
    MessagePayload,
    UNKNOWN_SOURCE_TITLE,
    DEFAULT_SOURCE_KIND
)
from citemark.domain.models.render import (
    MessageRole,
    FormatMode,
    TextRun,
    LineBreak,
    ParagraphBreak,
    CitationMarker,
    RenderInstruction,
    Paragraph
)

__all__ = [
    "Segment",
    "CitationRecord",
    "SourceMetadata",
    "ScanResult",
    "MessagePayload",
    "UNKNOWN_SOURCE_TITLE",
    "DEFAULT_SOURCE_KIND",
    "MessageRole",
    "FormatMode",
    "TextRun",
    "LineBreak",
    "ParagraphBreak",
    "CitationMarker",
    "RenderInstruction",
    "Paragraph"
]
