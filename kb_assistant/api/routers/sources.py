"""Knowledge source API endpoints.

Routes:
- GET /sources - List ingested URLs with chunk counts
- POST /sources/delete - Remove every chunk of a URL

Dependencies: kb_assistant.application.services.source_service
System role: Source management HTTP API
"""

from fastapi import APIRouter, Depends

from kb_assistant.api.deps import get_source_service
from kb_assistant.api.errors import handle_api_errors
from kb_assistant.application.services import SourceService
from kb_assistant.models.common import ErrorResponse
from kb_assistant.models.source import (
    DeleteSourceRequest,
    DeleteSourceResponse,
    SourceListResponse,
)

router = APIRouter(prefix="/sources", tags=["sources"])


@router.get("", response_model=SourceListResponse)
@handle_api_errors("Fetching sources")
async def list_sources(
    source_service: SourceService = Depends(get_source_service),
) -> SourceListResponse:
    """List sources, most recently updated first."""
    return await source_service.list_sources()


@router.post(
    "/delete",
    response_model=DeleteSourceResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@handle_api_errors("Deleting source")
async def delete_source(
    request: DeleteSourceRequest,
    source_service: SourceService = Depends(get_source_service),
) -> DeleteSourceResponse:
    """Delete all chunks whose source_url matches."""
    return await source_service.delete_source(request.url)
