"""
RAG orchestrator for knowledge base Q&A.

Runs the full answer pipeline: cache lookup, retrieval with score
filtering, context packing, prompt assembly, LLM call, source
deduplication and cache store.

Dependencies: langchain_core, fastapi.concurrency, kb_assistant.core
System role: RAG Q&A orchestration
"""

import asyncio
import hashlib
import json
import logging
from typing import Any
from urllib.parse import urlparse

from fastapi.concurrency import run_in_threadpool
from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser

from kb_assistant.configs.settings import Settings
from kb_assistant.core.cache import BoundedTTLCache
from kb_assistant.core.exceptions import GenerationError, KnowledgeBaseError, VectorStoreError
from kb_assistant.core.rag_query.prompt import (
    INSUFFICIENT_CONTEXT_ANSWER,
    NO_INFORMATION_ANSWER,
    RAG_ANSWER_PROMPT,
    format_chat_history,
)
from kb_assistant.core.rag_query.schema import RAGAnswer
from kb_assistant.core.retriever import RetrievalResult, Retriever
from kb_assistant.core.text_processing import estimate_token_count, optimize_context
from kb_assistant.models.chat import AnswerOutcome, ChatMessage, RetrievalDebug, SourceInfo
from kb_assistant.models.chunk import ScoredCandidate

logger = logging.getLogger(__name__)


def build_cache_key(question: str, k: int, filter: dict[str, Any] | None) -> str:
    """
    Hash question, k and filter into a cache key.

    The filter is serialized with sorted keys so logically equal filters
    produce the same key.
    """
    payload = json.dumps(
        {"question": question, "k": k, "filter": filter},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def collect_sources(candidates: list[ScoredCandidate], max_sources: int = 3) -> list[SourceInfo]:
    """
    Distinct sources by URL in candidate order.

    The first title seen for a URL wins; untitled pages use the hostname.
    """
    sources: dict[str, SourceInfo] = {}
    for candidate in candidates:
        metadata = candidate.chunk.metadata
        url = metadata.source_url
        if not url or url in sources:
            continue
        title = metadata.title or urlparse(url).hostname or url
        sources[url] = SourceInfo(title=title, url=url)
    return list(sources.values())[:max_sources]


class RAGOrchestrator:
    """
    Knowledge base Q&A pipeline.

    Stages run strictly in order: retrieval, context optimization, LLM.
    Retrieval runs in a worker thread; both retrieval and the LLM call are
    time-bounded.
    """

    def __init__(
        self,
        retriever: Retriever,
        chat_model: BaseChatModel,
        cache: BoundedTTLCache[RAGAnswer],
        settings: Settings,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            retriever: Retrieval pipeline over the vector index
            chat_model: LangChain chat model used for generation
            cache: Shared answer cache
            settings: Default settings (overridable per call)
        """
        self.retriever = retriever
        self.chat_model = chat_model
        self.cache = cache
        self.settings = settings
        self._parser = StrOutputParser()

    async def _retrieve(
        self,
        question: str,
        k: int,
        filter: dict[str, Any] | None,
        settings: Settings,
    ) -> RetrievalResult:
        timeout = settings.vector_store.query_timeout_seconds
        try:
            return await asyncio.wait_for(
                run_in_threadpool(
                    self.retriever.retrieve, question, k, filter, settings.retrieval
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"{__name__}:_retrieve - Retrieval timed out after {timeout}s")
            raise VectorStoreError(
                f"Retrieval timed out after {timeout}s",
                operation="query",
                cause=e,
            ) from e
        except KnowledgeBaseError:
            raise
        except Exception as e:
            logger.exception(f"{__name__}:_retrieve - Retrieval failed")
            raise VectorStoreError("Retrieval failed", operation="query", cause=e) from e

    async def _generate(
        self,
        question: str,
        context: str,
        chat_history: list[ChatMessage],
        settings: Settings,
    ) -> str:
        messages = RAG_ANSWER_PROMPT.format_messages(
            context=context,
            chat_history=format_chat_history(
                chat_history, settings.retrieval.max_history_messages
            ),
            question=question,
        )
        timeout = settings.llm.timeout_seconds
        try:
            response = await asyncio.wait_for(self.chat_model.ainvoke(messages), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{__name__}:_generate - LLM call timed out after {timeout}s")
            raise GenerationError(
                f"LLM call timed out after {timeout}s",
                operation="complete",
                cause=e,
            ) from e
        except Exception as e:
            logger.exception(f"{__name__}:_generate - LLM call failed")
            raise GenerationError(
                f"LLM call failed: {e}",
                operation="complete",
                cause=e,
            ) from e

        return self._parser.invoke(response)

    async def answer(
        self,
        question: str,
        chat_history: list[ChatMessage] | None = None,
        k: int | None = None,
        filter: dict[str, Any] | None = None,
        settings: Settings | None = None,
    ) -> RAGAnswer:
        """
        Answer a question from the knowledge base.

        Args:
            question: User question
            chat_history: Earlier conversation turns, oldest first
            k: Number of chunks to retrieve (defaults to retrieval.default_k)
            filter: Metadata equality filter
            settings: Per-request settings (defaults to the orchestrator's)

        Returns:
            RAGAnswer: Answer, sources, cache flag, outcome and debug stats.
            Empty retrieval or empty context yield fixed answers without an
            LLM call.

        Raises:
            VectorStoreError: When retrieval fails or times out
            GenerationError: When the LLM fails or times out
        """
        settings = settings or self.settings
        retrieval_settings = settings.retrieval
        k = k or retrieval_settings.default_k
        chat_history = chat_history or []

        cache_key = build_cache_key(question, k, filter)
        if retrieval_settings.cache_enabled:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info(f"{__name__}:answer - Cache hit {cache_key[:12]}")
                return cached.model_copy(update={"cached": True})
        generation = self.cache.generation

        result = await self._retrieve(question, k, filter, settings)
        debug = RetrievalDebug(
            docs_retrieved=len(result.candidates),
            docs_after_filtering=len(result.selected),
            avg_score=result.avg_score,
            retrieval_mode=result.mode,
        )

        if not result.selected:
            logger.info(f"{__name__}:answer - No relevant chunks for question")
            return RAGAnswer(
                answer=NO_INFORMATION_ANSWER,
                outcome=AnswerOutcome.NO_INFORMATION,
                debug=debug,
            )

        context = optimize_context(
            result.chunks, question, retrieval_settings.max_context_tokens
        )
        if not context.strip():
            logger.info(f"{__name__}:answer - Context empty after optimization")
            return RAGAnswer(
                answer=INSUFFICIENT_CONTEXT_ANSWER,
                outcome=AnswerOutcome.INSUFFICIENT_CONTEXT,
                debug=debug,
            )
        debug.context_tokens = estimate_token_count(context)

        answer_text = await self._generate(question, context, chat_history, settings)

        answer = RAGAnswer(
            answer=answer_text,
            sources=collect_sources(result.selected, retrieval_settings.max_sources),
            outcome=AnswerOutcome.ANSWERED,
            debug=debug,
        )

        if retrieval_settings.cache_enabled:
            # Dropped when an ingest or delete cleared the cache meanwhile
            self.cache.set(
                cache_key,
                answer,
                retrieval_settings.cache_ttl_seconds,
                generation=generation,
            )

        logger.info(
            f"{__name__}:answer - Answered with {len(answer.sources)} sources, "
            f"avg_score={result.avg_score:.3f}, retrieval_mode={result.mode}"
        )
        return answer
