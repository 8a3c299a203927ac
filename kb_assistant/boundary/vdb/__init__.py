"""
Vector database boundary layer.

Provides vector index adapters for storage and retrieval operations.
- InMemoryVectorIndex: process-local index (default, tests)
- FAISSVectorIndex: FAISS index persisted to disk

Dependencies: langchain_core, langchain_community
System role: Vector store adapter for RAG retrieval
"""

from kb_assistant.boundary.vdb.vector_index import (
    FAISSVectorIndex,
    InMemoryVectorIndex,
    VectorIndex,
    metadata_matches,
)
from kb_assistant.boundary.vdb.vector_store_factory import create_embeddings, create_vector_index

__all__ = [
    "VectorIndex",
    "InMemoryVectorIndex",
    "FAISSVectorIndex",
    "metadata_matches",
    "create_embeddings",
    "create_vector_index",
]
