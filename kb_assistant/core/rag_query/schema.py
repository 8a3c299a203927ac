"""
RAG answer schema.

Defines the structured result of a question answered against the
knowledge base, including cited sources and retrieval statistics.

Dependencies: pydantic, kb_assistant.models.chat
System role: Orchestrator response schema definitions
"""

from pydantic import BaseModel, Field

from kb_assistant.models.chat import AnswerOutcome, RetrievalDebug, SourceInfo


class RAGAnswer(BaseModel):
    """Structured response from the RAG orchestrator."""

    answer: str = Field(description="Answer grounded in the knowledge base")
    sources: list[SourceInfo] = Field(
        default_factory=list,
        description="Distinct source pages behind the answer",
    )
    cached: bool = Field(default=False, description="Served from the answer cache")
    outcome: AnswerOutcome = Field(default=AnswerOutcome.ANSWERED)
    debug: RetrievalDebug = Field(default_factory=RetrievalDebug)
