"""
Message parsing and rendering services.
"""
from citemark.domain.services.citation_scanner import scan, has_markers, iter_markers
from citemark.domain.services.inline_formatter import format_text, split_bold
from citemark.domain.services.segment_renderer import (
    SegmentRenderer,
    RenderStrategy,
    RENDER_STRATEGIES,
    flatten_paragraphs,
    to_segments
)

__all__ = [
    "scan",
    "has_markers",
    "iter_markers",
    "format_text",
    "split_bold",
    "SegmentRenderer",
    "RenderStrategy",
    "RENDER_STRATEGIES",
    "flatten_paragraphs",
    "to_segments"
]
