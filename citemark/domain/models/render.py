"""
Render instruction models.

A rendered message is an ordered sequence of instructions that a UI layer
turns into visual elements: styled text runs, line breaks, paragraph breaks
and citation markers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Union

from citemark.domain.models.citation import CitationRecord


class MessageRole(str, Enum):
    """Presentation contract of a message."""
    USER = "user"            # single-line, whitespace-collapsing
    ASSISTANT = "assistant"  # paragraphs and line breaks preserved


class FormatMode(str, Enum):
    """How the inline formatter treats line breaks."""
    INLINE = "inline"
    BLOCK = "block"


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text, "bold": self.bold}


@dataclass(frozen=True)
class LineBreak:
    def to_dict(self) -> Dict[str, Any]:
        return {"type": "line_break"}


@dataclass(frozen=True)
class ParagraphBreak:
    def to_dict(self) -> Dict[str, Any]:
        return {"type": "paragraph_break"}


@dataclass(frozen=True)
class CitationMarker:
    """
    Clickable citation marker.

    Carries the resolved citation record so the consuming UI can hand it to
    its click callback.
    """
    citation: CitationRecord

    @property
    def display_number(self) -> int:
        return self.citation.display_number

    @property
    def resolved_title(self) -> str:
        return self.citation.title

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "citation",
            "display_number": self.display_number,
            "resolved_title": self.resolved_title,
            "citation": self.citation.to_dict()
        }


RenderInstruction = Union[TextRun, LineBreak, ParagraphBreak, CitationMarker]


@dataclass(frozen=True)
class Paragraph:
    """A group of render instructions displayed as one block."""
    instructions: List[RenderInstruction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"instructions": [i.to_dict() for i in self.instructions]}
