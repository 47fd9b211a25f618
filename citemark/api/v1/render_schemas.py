"""
Pydantic schemas for the message rendering API v1 request and response models.
"""
from typing import List, Dict, Any, Optional, Union
from pydantic import BaseModel, Field

from citemark.domain.models.citation import (
    CitationRecord,
    MessagePayload,
    Segment,
    UNKNOWN_SOURCE_TITLE,
    DEFAULT_SOURCE_KIND
)
from citemark.domain.models.render import MessageRole


class SegmentSchema(BaseModel):
    """Schema for one message segment."""

    text: str = Field(..., description="Visible text of the segment")
    citation_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Display number of the cited source, for citation segments"
    )
    source_id: Optional[str] = Field(default=None, description="Cited source identifier")

    def to_domain(self) -> Segment:
        return Segment(text=self.text, citation_number=self.citation_number, source_id=self.source_id)


class CitationSchema(BaseModel):
    """Schema for a numbered citation."""

    display_number: int = Field(..., ge=1, description="Sequential number shown to the reader")
    source_id: str = Field(..., min_length=1, description="Cited source identifier")
    title: str = Field(default=UNKNOWN_SOURCE_TITLE, description="Source title")
    kind: str = Field(default=DEFAULT_SOURCE_KIND, description="Source type (e.g. 'pdf', 'website')")
    chunk_index: int = Field(default=0, ge=0, description="Index of the cited chunk within the source")

    def to_domain(self) -> CitationRecord:
        return CitationRecord(
            display_number=self.display_number,
            source_id=self.source_id,
            title=self.title,
            kind=self.kind,
            chunk_index=self.chunk_index
        )


class MessagePayloadSchema(BaseModel):
    """Pre-structured message content."""

    segments: List[SegmentSchema] = Field(default_factory=list, description="Ordered message segments")
    citations: List[CitationSchema] = Field(default_factory=list, description="Citations referenced by segments")

    def to_domain(self) -> MessagePayload:
        return MessagePayload(
            segments=[s.to_domain() for s in self.segments],
            citations=[c.to_domain() for c in self.citations]
        )


class ParseRequest(BaseModel):
    """Request schema for citation parsing."""

    text: str = Field(..., description="Raw message text with bracketed source identifiers")

    class Config:
        json_schema_extra = {
            "example": {
                "text": "The sky is blue [11111111-2222-3333-4444-555555555555]. It rains."
            }
        }


class ParseResponse(BaseModel):
    """Response schema for citation parsing."""

    segments: List[SegmentSchema] = Field(default_factory=list)
    citations: List[CitationSchema] = Field(default_factory=list)
    source_ids: List[str] = Field(default_factory=list, description="Distinct cited sources in order of appearance")
    has_markers: bool = Field(..., description="Whether the text contains any citation marker")


class RenderRequest(BaseModel):
    """Request schema for message rendering."""

    content: Union[str, MessagePayloadSchema] = Field(
        ...,
        description="Raw message text, or pre-structured segments and citations"
    )
    role: MessageRole = Field(
        default=MessageRole.ASSISTANT,
        description="'user' renders on one line, 'assistant' renders paragraphs"
    )
    notebook_id: Optional[str] = Field(
        default=None,
        description="Notebook whose sources are cited; enables title lookup"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "content": "The sky is **blue** [11111111-2222-3333-4444-555555555555].\n\nIt rains.",
                "role": "assistant",
                "notebook_id": "notebook-1"
            }
        }


class RenderResponse(BaseModel):
    """Response schema for message rendering."""

    role: MessageRole
    segments: List[SegmentSchema] = Field(default_factory=list)
    citations: List[CitationSchema] = Field(default_factory=list, description="Citations with resolved titles")
    instructions: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Flat render instruction sequence"
    )
    paragraphs: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Render instructions grouped by paragraph"
    )


class SourceInput(BaseModel):
    """Schema for registering a notebook source."""

    id: str = Field(..., min_length=1, description="Source identifier used in citation markers")
    title: Optional[str] = Field(default=None, description="Source title")
    kind: Optional[str] = Field(default=None, description="Source type")
    content: Optional[str] = Field(default=None, description="Full source text")
    summary: Optional[str] = Field(default=None, description="Short source summary")
    url: Optional[str] = Field(default=None, description="Original location of the source")


class RegisterSourcesRequest(BaseModel):
    """Request schema for registering notebook sources."""

    sources: List[SourceInput] = Field(..., min_length=1, description="Sources to store")


class SourcesWriteResponse(BaseModel):
    """Response schema for source writes."""

    notebook_id: str
    affected: int = Field(..., description="Number of source rows written or deleted")
