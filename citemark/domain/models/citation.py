"""
Citation data models.
Represents parsed message segments and the sources they cite.

Citation marker format in raw text: [xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx]
Example: "The sky is blue [11111111-2222-3333-4444-555555555555]."
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional, List

UNKNOWN_SOURCE_TITLE = "Unknown Source"
DEFAULT_SOURCE_KIND = "text"


@dataclass(frozen=True)
class Segment:
    """
    One contiguous span of a message.

    Prose segments carry no citation fields. Citation segments carry both
    citation_number and source_id, and their text is the visible marker ("[2]").
    """
    text: str
    citation_number: Optional[int] = None
    source_id: Optional[str] = None

    @property
    def is_citation(self) -> bool:
        return self.citation_number is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {"text": self.text}
        if self.citation_number is not None:
            data["citation_number"] = self.citation_number
        if self.source_id is not None:
            data["source_id"] = self.source_id
        return data


@dataclass(frozen=True)
class CitationRecord:
    """
    A numbered reference to a source.

    display_number is the 1-based sequential index shown to the reader. Every
    marker occurrence gets its own record, even when source_id repeats.
    """
    display_number: int
    source_id: str
    title: str = UNKNOWN_SOURCE_TITLE
    kind: str = DEFAULT_SOURCE_KIND
    chunk_index: int = 0

    def with_metadata(self, metadata: Optional["SourceMetadata"]) -> "CitationRecord":
        """Return a copy with title/kind taken from resolved metadata, if any."""
        if metadata is None:
            return self
        return replace(
            self,
            title=metadata.title or self.title,
            kind=metadata.kind or self.kind
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "display_number": self.display_number,
            "source_id": self.source_id,
            "title": self.title,
            "kind": self.kind,
            "chunk_index": self.chunk_index
        }


@dataclass(frozen=True)
class SourceMetadata:
    """Human-readable description of a cited source, owned by the source store."""
    title: str
    kind: str = DEFAULT_SOURCE_KIND
    content: str = ""
    summary: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "kind": self.kind,
            "content": self.content,
            "summary": self.summary,
            "url": self.url
        }


@dataclass(frozen=True)
class ScanResult:
    """Result of scanning raw text for citation markers."""
    segments: List[Segment] = field(default_factory=list)
    citations: List[CitationRecord] = field(default_factory=list)
    source_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segments": [s.to_dict() for s in self.segments],
            "citations": [c.to_dict() for c in self.citations],
            "source_ids": list(self.source_ids)
        }


@dataclass(frozen=True)
class MessagePayload:
    """Pre-structured message content: segments plus the citations they reference."""
    segments: List[Segment] = field(default_factory=list)
    citations: List[CitationRecord] = field(default_factory=list)

    @property
    def source_ids(self) -> List[str]:
        """Distinct cited source ids in order of first appearance."""
        seen = []
        for citation in self.citations:
            if citation.source_id not in seen:
                seen.append(citation.source_id)
        return seen
