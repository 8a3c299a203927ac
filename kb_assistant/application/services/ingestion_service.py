"""
Ingestion service orchestrator.

Coordinates page fetch, chunking and vector index storage for one URL.
Re-ingesting a URL replaces its previous chunks.

Dependencies: kb_assistant.boundary.web, kb_assistant.boundary.vdb, kb_assistant.core
System role: Knowledge base ingestion orchestration
"""

import logging
from urllib.parse import urlparse

from fastapi.concurrency import run_in_threadpool

from kb_assistant.boundary.vdb.vector_index import VectorIndex
from kb_assistant.boundary.web.crawler import PageFetcher
from kb_assistant.core.cache import BoundedTTLCache
from kb_assistant.core.chunking import ChunkSplitter
from kb_assistant.core.exceptions import ExtractionError, ValidationError
from kb_assistant.models.chunk import DocumentChunk
from kb_assistant.models.ingest import IngestResponse

logger = logging.getLogger(__name__)


def validate_url(url: str | None) -> str:
    """
    Check that url is an absolute http(s) URL.

    Raises:
        ValidationError: If url is missing or malformed
    """
    if not url or not url.strip():
        raise ValidationError("URL is required", field="url")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("Invalid URL format", field="url", details={"url": url})
    return url


class IngestionService:
    """
    Ingestion service orchestrator.

    Fetches a page, splits it into chunks, replaces any chunks previously
    stored for the URL, and invalidates the answer cache.
    """

    def __init__(
        self,
        page_fetcher: PageFetcher,
        splitter: ChunkSplitter,
        vector_index: VectorIndex,
        cache: BoundedTTLCache | None = None,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            page_fetcher: Fetches and extracts web pages
            splitter: Splits page text into chunks
            vector_index: Destination vector index
            cache: Answer cache cleared after the knowledge base changes
        """
        self.page_fetcher = page_fetcher
        self.splitter = splitter
        self.vector_index = vector_index
        self.cache = cache

    def _replace_source(self, url: str, chunks: list[DocumentChunk]) -> int:
        """
        Store chunks for url, then drop its chunks that the new set no longer has.

        Chunk ids are derived from url and position, so unchanged positions
        are overwritten in place and a failed upsert leaves the old content.
        """
        new_ids = set(self.vector_index.upsert(chunks))
        stale = [
            doc_id
            for doc_id in self.vector_index.ids_matching({"source_url": url})
            if doc_id not in new_ids
        ]
        return self.vector_index.delete_by_ids(stale)

    async def ingest(self, url: str, source_name: str | None = None) -> IngestResponse:
        """
        Ingest a web page into the knowledge base.

        Steps:
        1. Validate URL
        2. Fetch and extract page content
        3. Split content into chunks
        4. Upsert the new chunks, then delete the URL's leftover chunks
        5. Clear the answer cache, also when storage fails

        Args:
            url: Page URL
            source_name: Display name (defaults to the page title)

        Returns:
            IngestResponse: Number of chunks stored

        Raises:
            ValidationError: If the URL is invalid
            PageFetchError: If the page cannot be fetched
            ExtractionError: If no chunks can be produced
            VectorStoreError: If storage fails
        """
        url = validate_url(url)
        page = await self.page_fetcher.fetch(url)

        chunks = self.splitter.split(
            page.content,
            {
                "source_url": url,
                "title": page.title,
                "source_name": source_name or page.title,
                "last_modified": page.last_modified,
            },
        )
        if not chunks:
            logger.warning(f"{__name__}:ingest - No content extracted from {url}")
            raise ExtractionError("No content could be extracted from the URL", url=url)

        try:
            replaced = await run_in_threadpool(self._replace_source, url, chunks)
        finally:
            if self.cache is not None:
                self.cache.clear()

        logger.info(
            f"{__name__}:ingest - Ingested {url}: {len(chunks)} chunks "
            f"(replaced {replaced})"
        )
        return IngestResponse(
            message="Successfully ingested content",
            chunks_processed=len(chunks),
            url=url,
            title=page.title,
        )
