"""Service orchestrators."""

from .chat_service import ChatService
from .ingestion_service import IngestionService, validate_url
from .search_service import SearchService
from .source_service import SourceService

__all__ = [
    "ChatService",
    "IngestionService",
    "SearchService",
    "SourceService",
    "validate_url",
]
