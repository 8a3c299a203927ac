"""
Vector index factory selecting between in-memory and FAISS backends.

Depends on VECTOR_STORE_STORE_TYPE. Provides a consistent interface
regardless of the underlying implementation.

Dependencies: kb_assistant.boundary.vdb.vector_index, langchain_google_genai, kb_assistant.configs
System role: Vector index instantiation and selection
"""

import logging

from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from kb_assistant.boundary.vdb.vector_index import (
    FAISSVectorIndex,
    InMemoryVectorIndex,
    VectorIndex,
)
from kb_assistant.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def create_embeddings(settings: VectorStoreSettings) -> Embeddings:
    """Google Gemini embeddings for the configured model (reads GOOGLE_API_KEY)."""
    return GoogleGenerativeAIEmbeddings(model=settings.embedding_model)


def create_vector_index(
    settings: VectorStoreSettings,
    embeddings: Embeddings | None = None,
) -> VectorIndex:
    """
    Build the vector index configured by settings.

    Args:
        settings: Vector store settings
        embeddings: Embedding model override (defaults to Gemini embeddings)

    Returns:
        VectorIndex: InMemoryVectorIndex or FAISSVectorIndex

    Raises:
        ValueError: If store_type is invalid
    """
    store_type = settings.store_type.lower()
    embeddings = embeddings or create_embeddings(settings)

    if store_type == "memory":
        logger.info(f"{__name__}:create_vector_index - Creating in-memory vector index")
        return InMemoryVectorIndex(embeddings)

    if store_type == "faiss":
        logger.info(
            f"{__name__}:create_vector_index - Creating FAISS vector index at {settings.persist_directory}"
        )
        return FAISSVectorIndex(
            embeddings,
            persist_directory=settings.persist_directory,
            index_name=settings.index_name,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. Must be 'memory' or 'faiss'."
    )
