"""
Message rendering API v1 endpoints.
Parses citation markers, renders chat messages and manages notebook sources.
"""
from fastapi import APIRouter, Depends, status

from citemark.api.v1.render_schemas import (
    CitationSchema,
    ParseRequest,
    ParseResponse,
    RegisterSourcesRequest,
    RenderRequest,
    RenderResponse,
    SegmentSchema,
    SourcesWriteResponse
)
from citemark.api.v1.dependencies import (
    get_metadata_provider,
    get_render_service,
    get_source_repository
)
from citemark.application.message_rendering import MessageRenderService
from citemark.domain.services.citation_scanner import has_markers
from citemark.infrastructure.cache import CachedMetadataProvider
from citemark.infrastructure.sqlite import SQLiteSourceRepository
from citemark.utils.logger import step_logger

# Create router for rendering endpoints
router = APIRouter()


@router.post(
    "/citations/parse",
    response_model=ParseResponse,
    status_code=status.HTTP_200_OK,
    summary="Parse Citations",
    description="Split raw text into prose and numbered citation segments"
)
async def parse_citations(
    request: ParseRequest,
    service: MessageRenderService = Depends(get_render_service)
) -> ParseResponse:
    result = service.parse(request.text)

    step_logger.info(f"[RenderAPI] Parsed {len(result.citations)} citations from {len(request.text)} chars")

    return ParseResponse(
        segments=[SegmentSchema(**s.to_dict()) for s in result.segments],
        citations=[CitationSchema(**c.to_dict()) for c in result.citations],
        source_ids=result.source_ids,
        has_markers=has_markers(request.text)
    )


@router.post(
    "/messages/render",
    response_model=RenderResponse,
    status_code=status.HTTP_200_OK,
    summary="Render Message",
    description="Render a chat message into styled runs and citation markers",
    responses={
        200: {"description": "Rendered message", "model": RenderResponse},
        400: {"description": "Invalid request body"}
    }
)
async def render_message(
    request: RenderRequest,
    service: MessageRenderService = Depends(get_render_service)
) -> RenderResponse:
    """
    Render a user or assistant message.

    Raw text is scanned for citation markers; structured payloads are rendered
    as given. When notebook_id is set, citation titles are resolved from the
    notebook's sources.
    """
    content = request.content if isinstance(request.content, str) else request.content.to_domain()
    rendered = service.render_message(content, role=request.role, notebook_id=request.notebook_id)
    return RenderResponse(**rendered.to_dict())


@router.post(
    "/notebooks/{notebook_id}/sources",
    response_model=SourcesWriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Sources",
    description="Store or replace source metadata for a notebook"
)
async def register_sources(
    notebook_id: str,
    request: RegisterSourcesRequest,
    repository: SQLiteSourceRepository = Depends(get_source_repository),
    cache: CachedMetadataProvider = Depends(get_metadata_provider)
) -> SourcesWriteResponse:
    stored = repository.add_sources(notebook_id, [s.model_dump() for s in request.sources])
    cache.invalidate(notebook_id)
    return SourcesWriteResponse(notebook_id=notebook_id, affected=stored)


@router.delete(
    "/notebooks/{notebook_id}/sources",
    response_model=SourcesWriteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Sources",
    description="Remove every source of a notebook"
)
async def delete_sources(
    notebook_id: str,
    repository: SQLiteSourceRepository = Depends(get_source_repository),
    cache: CachedMetadataProvider = Depends(get_metadata_provider)
) -> SourcesWriteResponse:
    deleted = repository.delete_notebook_sources(notebook_id)
    cache.invalidate(notebook_id)
    return SourcesWriteResponse(notebook_id=notebook_id, affected=deleted)
