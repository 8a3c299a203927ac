"""Search API endpoints.

Routes:
- POST /search - Raw semantic search over the knowledge base

Dependencies: kb_assistant.application.services.search_service
System role: Search HTTP API
"""

from fastapi import APIRouter, Depends

from kb_assistant.api.deps import get_search_service
from kb_assistant.api.errors import handle_api_errors
from kb_assistant.application.services import SearchService
from kb_assistant.models.common import ErrorResponse
from kb_assistant.models.search import SearchRequest, SearchResponse

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@handle_api_errors("Search")
async def search(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Return chunks ranked by similarity, with scores."""
    return await search_service.search(request.query, request.k, request.filter)
