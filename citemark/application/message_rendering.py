"""
Message Rendering Service.

Composes the citation pipeline for one chat message:
normalize content -> resolve source metadata -> render instructions.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from citemark.domain.interfaces.source_metadata_provider import SourceMetadataProvider
from citemark.domain.models.citation import (
    CitationRecord,
    MessagePayload,
    ScanResult,
    Segment,
    SourceMetadata,
)
from citemark.domain.models.render import MessageRole, Paragraph, RenderInstruction
from citemark.domain.services.citation_scanner import scan
from citemark.domain.services.segment_renderer import SegmentRenderer, flatten_paragraphs, to_segments
from citemark.utils.logger import step_logger


@dataclass(frozen=True)
class RenderedMessage:
    """A message ready for display."""
    role: MessageRole
    segments: List[Segment] = field(default_factory=list)
    citations: List[CitationRecord] = field(default_factory=list)
    instructions: List[RenderInstruction] = field(default_factory=list)
    paragraphs: List[Paragraph] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "role": self.role.value,
            "segments": [s.to_dict() for s in self.segments],
            "citations": [c.to_dict() for c in self.citations],
            "instructions": [i.to_dict() for i in self.instructions],
            "paragraphs": [p.to_dict() for p in self.paragraphs]
        }


def resolve_citations(
    citations: List[CitationRecord],
    metadata: Mapping[str, SourceMetadata]
) -> List[CitationRecord]:
    """Fill title/kind of each citation from the metadata map where available."""
    return [c.with_metadata(metadata.get(c.source_id)) for c in citations]


class MessageRenderService:
    """
    Service for rendering chat messages with source citations.

    Metadata lookup is best-effort: provider failures are logged and the
    message renders with default source titles.
    """

    def __init__(
        self,
        metadata_provider: Optional[SourceMetadataProvider] = None,
        renderer: Optional[SegmentRenderer] = None
    ):
        """
        Initialize the service.

        Args:
            metadata_provider: Source metadata lookup; None renders without metadata
            renderer: Segment renderer (default strategies if omitted)
        """
        self.metadata_provider = metadata_provider
        self.renderer = renderer or SegmentRenderer()

    def parse(self, text: str) -> ScanResult:
        """Scan raw text for citation markers."""
        return scan(text)

    def fetch_metadata(
        self,
        notebook_id: Optional[str],
        source_ids: List[str]
    ) -> Dict[str, SourceMetadata]:
        """
        Look up metadata for the cited sources.

        Returns an empty map when there is no provider, nothing to look up, or
        the provider fails.
        """
        if self.metadata_provider is None or not notebook_id or not source_ids:
            return {}

        try:
            return self.metadata_provider.lookup(notebook_id, source_ids)
        except Exception as e:
            step_logger.error(f"[RenderService] Metadata lookup failed for notebook {notebook_id}: {e}")
            return {}

    def render_message(
        self,
        content: Union[str, MessagePayload],
        role: Union[MessageRole, str] = MessageRole.ASSISTANT,
        notebook_id: Optional[str] = None
    ) -> RenderedMessage:
        """
        Render a message for display.

        Args:
            content: Raw message text or a pre-structured payload
            role: Presentation role ("user" or "assistant")
            notebook_id: Notebook whose sources the message cites

        Returns:
            RenderedMessage with resolved citations and render instructions
        """
        role = MessageRole(role)
        payload = to_segments(content)
        metadata = self.fetch_metadata(notebook_id, payload.source_ids)

        paragraphs = self.renderer.render_paragraphs(payload.segments, payload.citations, role, metadata)
        instructions = flatten_paragraphs(paragraphs)

        step_logger.info(
            f"[RenderService] Rendered {role.value} message: {len(payload.segments)} segments, "
            f"{len(payload.citations)} citations, {len(metadata)} sources resolved"
        )

        return RenderedMessage(
            role=role,
            segments=list(payload.segments),
            citations=resolve_citations(payload.citations, metadata),
            instructions=instructions,
            paragraphs=paragraphs
        )
