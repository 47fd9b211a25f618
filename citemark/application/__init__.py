"""
Application services.
"""
from citemark.application.message_rendering import (
    MessageRenderService,
    RenderedMessage,
    resolve_citations
)

__all__ = ["MessageRenderService", "RenderedMessage", "resolve_citations"]
