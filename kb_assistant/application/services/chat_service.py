"""
Chat service for conversational Q&A with RAG.

Validates the incoming question and delegates to the RAG orchestrator.

Dependencies: kb_assistant.core.rag_query
System role: Chat service orchestration layer
"""

import logging

from kb_assistant.configs.settings import Settings
from kb_assistant.core.exceptions import ValidationError
from kb_assistant.core.rag_query import RAGOrchestrator
from kb_assistant.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)


class ChatService:
    """Chat service for knowledge base Q&A."""

    def __init__(self, orchestrator: RAGOrchestrator) -> None:
        """
        Initialize chat service.

        Args:
            orchestrator: RAG pipeline used to answer questions
        """
        self.orchestrator = orchestrator

    async def process_chat(
        self,
        request: ChatRequest,
        settings: Settings | None = None,
    ) -> ChatResponse:
        """
        Answer a chat request.

        Args:
            request: Question, history, k and filter
            settings: Per-request settings override

        Returns:
            ChatResponse: Answer with sources and retrieval stats

        Raises:
            ValidationError: If the question is blank
            UpstreamError: If retrieval or generation fails
        """
        question = request.question.strip() if request.question else ""
        if not question:
            raise ValidationError("Question is required", field="question")

        logger.info(f"{__name__}:process_chat - Question: {question[:80]!r}")

        result = await self.orchestrator.answer(
            question,
            chat_history=request.chat_history,
            k=request.k,
            filter=request.filter,
            settings=settings,
        )
        return ChatResponse(**result.model_dump())
