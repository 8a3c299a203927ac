"""
Core business logic module.

Contains the retrieval pipeline, context optimization, chunking, caching and
the exception hierarchy. All business rules and domain-specific logic reside here.
"""

from kb_assistant.core.exceptions import (
    ExtractionError,
    GenerationError,
    KnowledgeBaseError,
    PageFetchError,
    UpstreamError,
    ValidationError,
    VectorStoreError,
)

__all__ = [
    "KnowledgeBaseError",
    "ValidationError",
    "ExtractionError",
    "UpstreamError",
    "VectorStoreError",
    "GenerationError",
    "PageFetchError",
]
