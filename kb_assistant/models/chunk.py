"""
Chunk domain model.

Represents a slice of an ingested page with positional and descriptive
metadata, plus the scored pair returned by similarity queries.

Dependencies: pydantic, langchain_core.documents
System role: Document chunk data structure
"""

import hashlib
from typing import Any, Literal

from langchain_core.documents import Document
from pydantic import BaseModel, ConfigDict, Field

ChunkPosition = Literal["beginning", "middle", "end"]


def make_chunk_id(source_url: str, chunk_index: int) -> str:
    """Deterministic chunk identifier for a source position."""
    return hashlib.sha256(f"{source_url}#{chunk_index}".encode("utf-8")).hexdigest()


class ChunkMetadata(BaseModel):
    """Metadata stored alongside each chunk in the vector index."""

    # Extra keys (source_name, last_modified, ...) are carried through untouched
    model_config = ConfigDict(frozen=True, extra="allow")

    source_url: str = Field(default="", description="URL the chunk was extracted from")
    title: str = Field(default="", description="Page title")
    chunk_index: int = Field(default=0, description="0-based position within the source", ge=0)
    chunk_total: int = Field(default=1, description="Number of chunks in the ingestion", ge=1)
    char_count: int = Field(default=0, description="Characters in the chunk text")
    word_count: int = Field(default=0, description="Whitespace-separated words in the chunk text")
    position: ChunkPosition = Field(default="beginning", description="Coarse location in the source")
    preview: str = Field(default="", description="First sentence, at most 150 characters")
    keywords: list[str] = Field(default_factory=list, description="Most frequent content words")
    updated_at: str = Field(default="", description="ISO-8601 ingestion timestamp")


class DocumentChunk(BaseModel):
    """Immutable chunk value object produced by the splitter."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str = Field(description="Deterministic chunk identifier (hash)")
    text: str = Field(description="Chunk text content")
    metadata: ChunkMetadata = Field(description="Chunk metadata")

    def to_document(self) -> Document:
        """Convert to a LangChain Document for vector store insertion."""
        return Document(
            id=self.chunk_id,
            page_content=self.text,
            metadata=self.metadata.model_dump(),
        )

    @classmethod
    def from_document(cls, document: Document, chunk_id: str | None = None) -> "DocumentChunk":
        """Rebuild a chunk from a Document returned by the vector store."""
        metadata: dict[str, Any] = dict(document.metadata or {})
        resolved_id = chunk_id or document.id or make_chunk_id(
            metadata.get("source_url", ""), int(metadata.get("chunk_index", 0))
        )
        return cls(
            chunk_id=resolved_id,
            text=document.page_content,
            metadata=ChunkMetadata(**metadata),
        )


class ScoredCandidate(BaseModel):
    """A chunk paired with its similarity to a query (higher is more similar)."""

    model_config = ConfigDict(frozen=True)

    chunk: DocumentChunk
    score: float = Field(description="Similarity score")
