"""Chat API endpoints.

Routes:
- POST /chat - Answer a question from the knowledge base

Dependencies: kb_assistant.application.services.chat_service
System role: Chat messaging HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from kb_assistant.api.deps import get_chat_service
from kb_assistant.api.errors import handle_api_errors
from kb_assistant.application.services import ChatService
from kb_assistant.models.chat import ChatRequest, ChatResponse
from kb_assistant.models.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@handle_api_errors("Chat")
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a question using only ingested content.

    When nothing relevant is indexed the response is still successful and
    carries a fixed answer with outcome "no_information".

    Raises:
        400: Blank question
        502: Vector index or LLM failure
    """
    return await chat_service.process_chat(request)
