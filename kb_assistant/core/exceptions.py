"""
Exception hierarchy for the knowledge base assistant.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Taxonomy:
    ValidationError  - malformed or missing input, raised before any retrieval
    ExtractionError  - fetched content produced no chunks
    UpstreamError    - vector index, LLM or page fetch failed or timed out

"No relevant knowledge" is not an error: it is a normal answer outcome.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class KnowledgeBaseError(Exception):
    """Base exception for all knowledge base application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(KnowledgeBaseError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ExtractionError(KnowledgeBaseError):
    """Raised when no chunks can be produced from fetched content."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            message: Error message
            url: Source URL that yielded no content
            details: Additional context
        """
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)


class UpstreamError(KnowledgeBaseError):
    """Raised when an external collaborator fails or times out."""

    service: str = "upstream"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message
            operation: Operation that failed (query, upsert, complete, fetch...)
            cause: Original exception raised by the collaborator
            details: Additional context
        """
        details = details or {}
        details["service"] = self.service
        if operation:
            details["operation"] = operation
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        self.cause = cause
        super().__init__(message, details)


class VectorStoreError(UpstreamError):
    """Raised when vector store operations fail."""

    service = "vector_store"


class GenerationError(UpstreamError):
    """Raised when the LLM call fails."""

    service = "llm"


class PageFetchError(UpstreamError):
    """Raised when a web page cannot be retrieved."""

    service = "page_fetch"
