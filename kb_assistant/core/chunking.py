"""
Text chunking using RecursiveCharacterTextSplitter.

Splits extracted page text into overlapping chunks that respect document
structure and annotates each chunk with positional and descriptive metadata.

Dependencies: langchain_text_splitters, kb_assistant.core.text_processing
System role: Chunk splitter for the ingestion pipeline
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from langchain_text_splitters import RecursiveCharacterTextSplitter

from kb_assistant.core.text_processing import extract_keywords
from kb_assistant.models.chunk import ChunkMetadata, ChunkPosition, DocumentChunk, make_chunk_id

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
PREVIEW_MAX_CHARS = 150

# Coarsest to finest; the empty pattern falls back to raw characters
SEPARATORS = [
    r"\n\s*\n\s*\n",
    r"\n\n",
    r"\n",
    r"\. ",
    r"! ",
    r"\? ",
    r"; ",
    r": ",
    r", ",
    r" ",
    r"",
]

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def chunk_position(chunk_index: int, chunk_total: int) -> ChunkPosition:
    """Bucket a chunk by its normalized index within the source."""
    ratio = chunk_index / chunk_total
    if ratio < 0.33:
        return "beginning"
    if ratio >= 0.67:
        return "end"
    return "middle"


def first_sentence_preview(text: str, max_chars: int = PREVIEW_MAX_CHARS) -> str:
    """First sentence of text, cut to max_chars."""
    stripped = text.strip()
    if not stripped:
        return ""
    first = SENTENCE_BOUNDARY.split(stripped, maxsplit=1)[0]
    return first[:max_chars].rstrip()


class ChunkSplitter:
    """Split text into annotated DocumentChunks."""

    def __init__(
        self,
        max_tokens: int = 600,
        overlap_percent: float = 0.2,
        max_keywords: int = 5,
    ) -> None:
        """
        Initialize splitter configuration.

        Args:
            max_tokens: Chunk budget in tokens (4 characters per token)
            overlap_percent: Fraction of the budget shared by adjacent chunks
            max_keywords: Keywords stored per chunk
        """
        if max_tokens < 1:
            raise ValueError("max_tokens must be positive")
        if not 0 <= overlap_percent < 1:
            raise ValueError("overlap_percent must be in [0, 1)")

        self.chunk_size = max_tokens * CHARS_PER_TOKEN
        self.chunk_overlap = int(self.chunk_size * overlap_percent)
        self.max_keywords = max_keywords

        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            separators=SEPARATORS,
            is_separator_regex=True,
            keep_separator="end",
            add_start_index=True,
            length_function=len,
        )

    def split(self, text: str, base_metadata: dict[str, Any] | None = None) -> list[DocumentChunk]:
        """
        Split text into chunks.

        Args:
            text: Raw document text
            base_metadata: Metadata copied onto every chunk (source_url, title, ...)

        Returns:
            list[DocumentChunk]: Chunks in document order, empty for blank text
        """
        if not text or not text.strip():
            return []

        metadata = dict(base_metadata or {})
        source_url = str(metadata.get("source_url", ""))
        updated_at = datetime.now(timezone.utc).isoformat()

        documents = self._splitter.create_documents([text], metadatas=[metadata])
        total = len(documents)

        chunks: list[DocumentChunk] = []
        for index, document in enumerate(documents):
            body = document.page_content
            chunk_metadata = ChunkMetadata(
                **{
                    **document.metadata,
                    "source_url": source_url,
                    "title": str(metadata.get("title", "")),
                    "chunk_index": index,
                    "chunk_total": total,
                    "char_count": len(body),
                    "word_count": len(body.split()),
                    "position": chunk_position(index, total),
                    "preview": first_sentence_preview(body),
                    "keywords": extract_keywords(body, self.max_keywords),
                    "updated_at": updated_at,
                }
            )
            chunks.append(
                DocumentChunk(
                    chunk_id=make_chunk_id(source_url, index),
                    text=body,
                    metadata=chunk_metadata,
                )
            )

        logger.info(
            f"{__name__}:split - Created {total} chunks from {len(text)} characters "
            f"(chunk_size={self.chunk_size}, overlap={self.chunk_overlap})"
        )
        return chunks
