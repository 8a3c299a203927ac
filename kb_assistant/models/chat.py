"""
Chat domain models and schemas.

Request/response schemas for knowledge base Q&A.

Dependencies: pydantic
System role: Chat API contracts
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Single chat message in the conversation supplied by the client."""

    role: Literal["user", "assistant"] = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")


class ChatRequest(BaseModel):
    """Request schema for chat questions."""

    question: str = Field(description="User question")
    chat_history: list[ChatMessage] = Field(
        default_factory=list,
        description="Earlier turns of the conversation, oldest first",
    )
    k: int | None = Field(default=None, description="Number of chunks to retrieve", ge=1, le=50)
    filter: dict[str, Any] | None = Field(
        default=None,
        description="Metadata equality filter, e.g. {'source_url': 'https://...'}",
    )


class SourceInfo(BaseModel):
    """Source cited by an answer."""

    title: str
    url: str


class AnswerOutcome(str, Enum):
    """How an answer was produced."""

    ANSWERED = "answered"
    NO_INFORMATION = "no_information"
    INSUFFICIENT_CONTEXT = "insufficient_context"


class RetrievalDebug(BaseModel):
    """Retrieval statistics reported with every answer."""

    docs_retrieved: int = 0
    docs_after_filtering: int = 0
    avg_score: float = 0.0
    retrieval_mode: str = "similarity"
    context_tokens: int = 0


class ChatResponse(BaseModel):
    """Response schema for chat questions."""

    success: bool = True
    answer: str
    sources: list[SourceInfo] = Field(default_factory=list)
    cached: bool = False
    outcome: AnswerOutcome = AnswerOutcome.ANSWERED
    debug: RetrievalDebug = Field(default_factory=RetrievalDebug)
