"""
Source service for knowledge base management.

Lists ingested URLs aggregated over their chunks and deletes a URL's chunks.

Dependencies: kb_assistant.boundary.vdb
System role: Knowledge source management
"""

import logging
from datetime import datetime, timezone
from urllib.parse import urlparse

from fastapi.concurrency import run_in_threadpool

from kb_assistant.boundary.vdb.vector_index import VectorIndex
from kb_assistant.core.cache import BoundedTTLCache
from kb_assistant.core.exceptions import ValidationError
from kb_assistant.models.source import DeleteSourceResponse, SourceItem, SourceListResponse

logger = logging.getLogger(__name__)


class SourceService:
    """List and delete ingested sources."""

    def __init__(self, vector_index: VectorIndex, cache: BoundedTTLCache | None = None) -> None:
        self.vector_index = vector_index
        self.cache = cache

    async def list_sources(self) -> SourceListResponse:
        """
        Aggregate stored chunks by source URL.

        Returns:
            SourceListResponse: One item per URL, most recently updated first
        """
        chunks = await run_in_threadpool(self.vector_index.list_chunks)

        sources: dict[str, SourceItem] = {}
        for chunk in chunks:
            metadata = chunk.metadata
            url = metadata.source_url
            if not url:
                continue

            existing = sources.get(url)
            if existing is None:
                sources[url] = SourceItem(
                    url=url,
                    title=metadata.title or urlparse(url).hostname or url,
                    chunks_count=1,
                    last_updated=metadata.updated_at or datetime.now(timezone.utc).isoformat(),
                )
                continue

            existing.chunks_count += 1
            if metadata.updated_at and metadata.updated_at > existing.last_updated:
                existing.last_updated = metadata.updated_at

        # ISO-8601 UTC timestamps order lexicographically
        items = sorted(sources.values(), key=lambda item: item.last_updated, reverse=True)
        return SourceListResponse(sources=items, count=len(items))

    async def delete_source(self, url: str) -> DeleteSourceResponse:
        """
        Delete every chunk ingested from url.

        Raises:
            ValidationError: If url is blank
            VectorStoreError: If deletion fails
        """
        url = url.strip() if url else ""
        if not url:
            raise ValidationError("URL is required", field="url")

        deleted = await run_in_threadpool(
            self.vector_index.delete_by_metadata, {"source_url": url}
        )
        if self.cache is not None:
            self.cache.clear()

        logger.info(f"{__name__}:delete_source - Deleted {deleted} chunks for {url}")
        return DeleteSourceResponse(
            message="Source deleted successfully",
            url=url,
            chunks_deleted=deleted,
        )
