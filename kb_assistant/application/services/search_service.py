"""
Search service for raw semantic search.

Returns ranked chunks with their scores; no LLM is involved.

Dependencies: kb_assistant.core.retriever
System role: Semantic search orchestration
"""

import asyncio
import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from kb_assistant.configs.settings import Settings
from kb_assistant.core.exceptions import ValidationError, VectorStoreError
from kb_assistant.core.retriever import Retriever
from kb_assistant.models.search import SearchResponse, SearchResult

logger = logging.getLogger(__name__)


class SearchService:
    """Semantic search over the knowledge base."""

    def __init__(self, retriever: Retriever, settings: Settings) -> None:
        self.retriever = retriever
        self.settings = settings

    async def search(
        self,
        query: str,
        k: int | None = None,
        filter: dict[str, Any] | None = None,
    ) -> SearchResponse:
        """
        Rank chunks by similarity to query.

        Raises:
            ValidationError: If the query is blank
            VectorStoreError: If the index query fails or times out
        """
        query = query.strip() if query else ""
        if not query:
            raise ValidationError("Query is required", field="query")

        k = k or self.settings.retrieval.default_k
        timeout = self.settings.vector_store.query_timeout_seconds
        try:
            candidates = await asyncio.wait_for(
                run_in_threadpool(self.retriever.search, query, k, filter),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise VectorStoreError(
                f"Search timed out after {timeout}s",
                operation="query",
                cause=e,
            ) from e

        logger.info(f"{__name__}:search - {len(candidates)} results for k={k}")
        return SearchResponse(
            results=[
                SearchResult(
                    content=candidate.chunk.text,
                    metadata=candidate.chunk.metadata.model_dump(),
                    score=candidate.score,
                )
                for candidate in candidates
            ]
        )
