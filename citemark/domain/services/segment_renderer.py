"""
Segment Renderer.

Turns parsed message segments into render instructions for a UI layer.

Two presentation contracts share one code path, selected by a strategy table:
- user messages render on a single line, marker text kept inline
- assistant messages render as paragraphs; the marker text of a cited segment
  is replaced by a citation marker at the end of its last paragraph
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Union

from citemark.domain.models.citation import (
    CitationRecord,
    MessagePayload,
    ScanResult,
    Segment,
    SourceMetadata,
)
from citemark.domain.models.render import (
    CitationMarker,
    FormatMode,
    MessageRole,
    Paragraph,
    ParagraphBreak,
    RenderInstruction,
)
from citemark.domain.services.citation_scanner import scan
from citemark.domain.services.inline_formatter import format_text

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
MARKER_TEXT_PATTERN = re.compile(r"\[\d+\]")


@dataclass(frozen=True)
class RenderStrategy:
    """Per-role rendering behavior."""
    splits_paragraphs: bool
    strips_marker_text: bool
    emits_trailing_marker_only: bool
    format_mode: FormatMode


RENDER_STRATEGIES: Dict[MessageRole, RenderStrategy] = {
    MessageRole.USER: RenderStrategy(
        splits_paragraphs=False,
        strips_marker_text=False,
        emits_trailing_marker_only=False,
        format_mode=FormatMode.INLINE
    ),
    MessageRole.ASSISTANT: RenderStrategy(
        splits_paragraphs=True,
        strips_marker_text=True,
        emits_trailing_marker_only=True,
        format_mode=FormatMode.BLOCK
    ),
}


def to_segments(content: Union[str, MessagePayload, ScanResult, None]) -> MessagePayload:
    """
    Normalize message content into segments and citations.

    Raw text is scanned for citation markers; pre-structured payloads pass
    through unchanged.
    """
    if isinstance(content, MessagePayload):
        return content
    if isinstance(content, ScanResult):
        return MessagePayload(segments=content.segments, citations=content.citations)

    result = scan(content or "")
    return MessagePayload(segments=result.segments, citations=result.citations)


def flatten_paragraphs(paragraphs: List[Paragraph]) -> List[RenderInstruction]:
    """Join paragraphs into one sequence, separated by ParagraphBreak instructions."""
    instructions: List[RenderInstruction] = []
    for index, paragraph in enumerate(paragraphs):
        if index > 0:
            instructions.append(ParagraphBreak())
        instructions.extend(paragraph.instructions)
    return instructions


class SegmentRenderer:
    """
    Renders segments for one presentation role.

    Rendering is a pure function of its inputs: calling it again with the same
    segments, citations and metadata produces an identical result.
    """

    def __init__(self, strategies: Optional[Mapping[MessageRole, RenderStrategy]] = None):
        self.strategies = dict(strategies or RENDER_STRATEGIES)

    def render_paragraphs(
        self,
        segments: List[Segment],
        citations: List[CitationRecord],
        mode: Union[MessageRole, str],
        metadata: Optional[Mapping[str, SourceMetadata]] = None
    ) -> List[Paragraph]:
        """
        Render segments grouped into paragraphs.

        User messages produce at most one paragraph. Assistant messages produce
        one paragraph per non-blank chunk of each segment.

        Args:
            segments: Ordered message segments
            citations: Citation records referenced by the segments
            mode: Presentation role ("user" or "assistant")
            metadata: Optional source_id -> SourceMetadata map

        Returns:
            Ordered list of paragraphs
        """
        strategy = self.strategies[MessageRole(mode)]
        by_number: Dict[int, CitationRecord] = {}
        for record in citations:
            by_number.setdefault(record.display_number, record)
        metadata = metadata or {}

        paragraphs: List[Paragraph] = []
        line: List[RenderInstruction] = []

        for segment in segments:
            citation = self._resolve_citation(segment, by_number, metadata)
            chunks = self._split_chunks(segment.text, strategy)
            if not chunks and citation is not None:
                chunks = [""]

            for index, chunk in enumerate(chunks):
                is_last = index == len(chunks) - 1
                attach = citation is not None and (is_last or not strategy.emits_trailing_marker_only)

                if attach and strategy.strips_marker_text:
                    chunk = MARKER_TEXT_PATTERN.sub("", chunk, count=1)

                instructions = format_text(chunk, strategy.format_mode)
                if attach:
                    instructions.append(CitationMarker(citation=citation))

                if strategy.splits_paragraphs:
                    paragraphs.append(Paragraph(instructions=instructions))
                else:
                    line.extend(instructions)

        if line:
            paragraphs.append(Paragraph(instructions=line))
        return paragraphs

    def render(
        self,
        segments: List[Segment],
        citations: List[CitationRecord],
        mode: Union[MessageRole, str],
        metadata: Optional[Mapping[str, SourceMetadata]] = None
    ) -> List[RenderInstruction]:
        """
        Render segments into a flat instruction sequence.

        Paragraphs are separated by ParagraphBreak instructions.
        """
        return flatten_paragraphs(self.render_paragraphs(segments, citations, mode, metadata))

    @staticmethod
    def _split_chunks(text: str, strategy: RenderStrategy) -> List[str]:
        if not strategy.splits_paragraphs:
            return [text]
        text = text.replace("\r\n", "\n")
        return [chunk.strip() for chunk in text.split(PARAGRAPH_SEPARATOR) if chunk.strip()]

    @staticmethod
    def _resolve_citation(
        segment: Segment,
        by_number: Mapping[int, CitationRecord],
        metadata: Mapping[str, SourceMetadata]
    ) -> Optional[CitationRecord]:
        if segment.citation_number is None:
            return None

        record = by_number.get(segment.citation_number)
        if record is None:
            logger.debug("No citation record for marker %d, rendering as text", segment.citation_number)
            return None

        return record.with_metadata(metadata.get(record.source_id))
