"""
Dependency injection container.

ServiceContainer builds and caches the application's components on first
use. One container is created per app and stored on app.state; FastAPI
dependencies resolve services from the request's app.

Dependencies: kb_assistant.configs, kb_assistant.application, kb_assistant.boundary, kb_assistant.core
System role: DI container for service injection
"""

import logging

from fastapi import Request
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from kb_assistant.application.services import (
    ChatService,
    IngestionService,
    SearchService,
    SourceService,
)
from kb_assistant.boundary.vdb import VectorIndex, create_embeddings, create_vector_index
from kb_assistant.boundary.web import PageFetcher
from kb_assistant.configs import Settings, get_settings
from kb_assistant.core.cache import BoundedTTLCache
from kb_assistant.core.chunking import ChunkSplitter
from kb_assistant.core.rag_query import RAGAnswer, RAGOrchestrator
from kb_assistant.core.retriever import Retriever

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for cached service instances.

    Collaborators can be injected through the constructor; anything not
    supplied is built lazily from settings.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        embeddings: Embeddings | None = None,
        vector_index: VectorIndex | None = None,
        chat_model: BaseChatModel | None = None,
        page_fetcher: PageFetcher | None = None,
    ) -> None:
        self._settings = settings
        self._embeddings = embeddings
        self._vector_index = vector_index
        self._chat_model = chat_model
        self._page_fetcher = page_fetcher
        self._splitter: ChunkSplitter | None = None
        self._query_cache: BoundedTTLCache[RAGAnswer] | None = None
        self._retriever: Retriever | None = None
        self._orchestrator: RAGOrchestrator | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def embeddings(self) -> Embeddings:
        """Get cached embedding model."""
        if self._embeddings is None:
            self._embeddings = create_embeddings(self.settings.vector_store)
        return self._embeddings

    @property
    def vector_index(self) -> VectorIndex:
        """Get cached vector index."""
        if self._vector_index is None:
            self._vector_index = create_vector_index(
                self.settings.vector_store, embeddings=self.embeddings
            )
        return self._vector_index

    @property
    def chat_model(self) -> BaseChatModel:
        """Get cached Gemini chat model."""
        if self._chat_model is None:
            llm = self.settings.llm
            self._chat_model = ChatGoogleGenerativeAI(
                model=llm.model,
                temperature=llm.temperature,
                timeout=llm.timeout_seconds,
                max_retries=llm.max_retries,
            )
            logger.info(f"{__name__}:chat_model - Initialized {llm.model}")
        return self._chat_model

    @property
    def page_fetcher(self) -> PageFetcher:
        if self._page_fetcher is None:
            crawler = self.settings.crawler
            self._page_fetcher = PageFetcher(
                timeout_seconds=crawler.timeout_seconds,
                user_agent=crawler.user_agent,
                min_content_chars=crawler.min_content_chars,
            )
        return self._page_fetcher

    @property
    def splitter(self) -> ChunkSplitter:
        if self._splitter is None:
            chunking = self.settings.chunking
            self._splitter = ChunkSplitter(
                max_tokens=chunking.max_tokens,
                overlap_percent=chunking.overlap_percent,
                max_keywords=chunking.max_keywords,
            )
        return self._splitter

    @property
    def query_cache(self) -> BoundedTTLCache[RAGAnswer]:
        """Get the shared answer cache."""
        if self._query_cache is None:
            retrieval = self.settings.retrieval
            self._query_cache = BoundedTTLCache(
                max_entries=retrieval.cache_max_entries,
                default_ttl_seconds=retrieval.cache_ttl_seconds,
            )
        return self._query_cache

    @property
    def retriever(self) -> Retriever:
        if self._retriever is None:
            self._retriever = Retriever(self.vector_index)
        return self._retriever

    @property
    def orchestrator(self) -> RAGOrchestrator:
        """Get cached RAG orchestrator."""
        if self._orchestrator is None:
            self._orchestrator = RAGOrchestrator(
                retriever=self.retriever,
                chat_model=self.chat_model,
                cache=self.query_cache,
                settings=self.settings,
            )
        return self._orchestrator

    @property
    def ingestion_service(self) -> IngestionService:
        return IngestionService(
            page_fetcher=self.page_fetcher,
            splitter=self.splitter,
            vector_index=self.vector_index,
            cache=self.query_cache,
        )

    @property
    def chat_service(self) -> ChatService:
        return ChatService(orchestrator=self.orchestrator)

    @property
    def search_service(self) -> SearchService:
        return SearchService(retriever=self.retriever, settings=self.settings)

    @property
    def source_service(self) -> SourceService:
        return SourceService(vector_index=self.vector_index, cache=self.query_cache)

    def prewarm(self) -> None:
        """Build the heavy collaborators ahead of the first request."""
        _ = self.vector_index
        _ = self.orchestrator

    def clear(self) -> None:
        """Drop cached answers and built instances that were not injected."""
        if self._query_cache is not None:
            self._query_cache.clear()
        self._retriever = None
        self._orchestrator = None
        self._splitter = None


def get_service_container(request: Request) -> ServiceContainer:
    """Resolve the container attached to the running app."""
    return request.app.state.services


def get_settings_dependency(request: Request) -> Settings:
    return get_service_container(request).settings


def get_ingestion_service(request: Request) -> IngestionService:
    """
    Get ingestion service instance.

    Args:
        request: Incoming request (carries the app's container)

    Returns:
        IngestionService: Service wired to the shared index and cache
    """
    return get_service_container(request).ingestion_service


def get_chat_service(request: Request) -> ChatService:
    """
    Get chat service instance with the RAG orchestrator.

    Args:
        request: Incoming request (carries the app's container)

    Returns:
        ChatService: Chat service with configured orchestrator
    """
    return get_service_container(request).chat_service


def get_search_service(request: Request) -> SearchService:
    return get_service_container(request).search_service


def get_source_service(request: Request) -> SourceService:
    return get_service_container(request).source_service
