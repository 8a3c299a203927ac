"""Ingestion API endpoints.

Routes:
- POST /admin/ingest - Fetch a web page and add it to the knowledge base

Dependencies: kb_assistant.application.services.ingestion_service
System role: Ingestion HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from kb_assistant.api.deps import get_ingestion_service
from kb_assistant.api.errors import handle_api_errors
from kb_assistant.application.services import IngestionService
from kb_assistant.models.common import ErrorResponse
from kb_assistant.models.ingest import IngestRequest, IngestResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["ingest"])


@router.post(
    "/ingest",
    response_model=IngestResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@handle_api_errors("Ingestion")
async def ingest(
    request: IngestRequest,
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> IngestResponse:
    """Ingest a URL into the knowledge base.

    Flow:
    1. Fetch the page and extract its main content
    2. Split the content into chunks
    3. Replace the URL's chunks in the vector index

    Returns:
        IngestResponse: Number of chunks processed

    Raises:
        400: Missing or invalid URL
        422: No content could be extracted
        502: Page fetch or vector index failure
    """
    return await ingestion_service.ingest(request.url, request.source_name)
