"""
Shared test fixtures and configuration for entire test suite.

Provides: deterministic embeddings, in-memory vector index, chat model mocks,
settings with test thresholds, chunk builders
Dependencies: pytest, langchain_core
System role: Test infrastructure and fixture management
"""

import math
import re
import zlib
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.messages import AIMessage

from kb_assistant.boundary.vdb.vector_index import InMemoryVectorIndex
from kb_assistant.configs import Settings
from kb_assistant.configs.chunking import ChunkingSettings
from kb_assistant.configs.retrieval import RetrievalSettings
from kb_assistant.configs.vector_store import VectorStoreSettings
from kb_assistant.models.chunk import ChunkMetadata, DocumentChunk, ScoredCandidate, make_chunk_id

TOKEN = re.compile(r"\w+")


class BagOfWordsEmbeddings(Embeddings):
    """
    Deterministic embeddings for tests.

    Each lower-cased word is hashed into one of `size` buckets and the
    counts are L2-normalized, so texts sharing words have higher cosine
    similarity. Bucket 0 is reserved so no vector is all zeros.
    """

    def __init__(self, size: int = 512) -> None:
        self.size = size

    def _embed(self, text: str) -> list[float]:
        vector = [0.0] * self.size
        vector[0] = 0.01
        for word in TOKEN.findall(text.lower()):
            vector[1 + zlib.crc32(word.encode("utf-8")) % (self.size - 1)] += 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        return [v / norm for v in vector]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._embed(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text)


def make_chunk(
    text: str,
    source_url: str = "https://docs.test/page",
    title: str = "Test Page",
    chunk_index: int = 0,
    chunk_total: int = 1,
    **extra,
) -> DocumentChunk:
    """Build a DocumentChunk with consistent metadata."""
    return DocumentChunk(
        chunk_id=make_chunk_id(source_url, chunk_index),
        text=text,
        metadata=ChunkMetadata(
            source_url=source_url,
            title=title,
            chunk_index=chunk_index,
            chunk_total=chunk_total,
            char_count=len(text),
            word_count=len(text.split()),
            updated_at=extra.pop("updated_at", "2024-01-01T00:00:00+00:00"),
            **extra,
        ),
    )


def make_candidate(text: str, score: float, **kwargs) -> ScoredCandidate:
    """Build a ScoredCandidate around make_chunk."""
    return ScoredCandidate(chunk=make_chunk(text, **kwargs), score=score)


@pytest.fixture
def embeddings() -> BagOfWordsEmbeddings:
    """Provide deterministic embeddings."""
    return BagOfWordsEmbeddings()


@pytest.fixture
def vector_index(embeddings: BagOfWordsEmbeddings) -> InMemoryVectorIndex:
    """Provide an empty in-memory vector index."""
    return InMemoryVectorIndex(embeddings)


@pytest.fixture
def settings() -> Settings:
    """
    Provide settings tuned for bag-of-words scores.

    Thresholds are lowered because hashed word counts give smaller cosine
    similarities than a real embedding model.
    """
    return Settings(
        vector_store=VectorStoreSettings(store_type="memory", query_timeout_seconds=5.0),
        retrieval=RetrievalSettings(
            similarity_threshold=0.3,
            fallback_threshold=0.25,
            cache_enabled=True,
        ),
        chunking=ChunkingSettings(max_tokens=50, overlap_percent=0.2),
    )


@pytest.fixture
def mock_chat_model() -> MagicMock:
    """
    Create mock chat model.

    Returns:
        MagicMock: Chat model whose ainvoke returns a fixed AIMessage
    """
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content="Python is a programming language."))
    return model


@pytest.fixture
def python_chunks() -> list[DocumentChunk]:
    """Chunks about two topics from two sources."""
    return [
        make_chunk(
            "Python is a popular programming language. Python code is easy to read and write.",
            source_url="https://docs.test/python",
            title="Python Guide",
            chunk_index=0,
            chunk_total=2,
        ),
        make_chunk(
            "Python programming language supports many paradigms including functional programming.",
            source_url="https://docs.test/python",
            title="Python Guide",
            chunk_index=1,
            chunk_total=2,
        ),
        make_chunk(
            "Bananas are yellow fruit that grow in tropical climates around the world.",
            source_url="https://docs.test/fruit",
            title="Fruit Facts",
        ),
    ]


@pytest.fixture(name="make_chunk")
def make_chunk_fixture():
    """Provide the DocumentChunk builder."""
    return make_chunk


@pytest.fixture(name="make_candidate")
def make_candidate_fixture():
    """Provide the ScoredCandidate builder."""
    return make_candidate
