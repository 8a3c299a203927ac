"""RAG query business logic.

Includes the answer orchestrator, prompt template and answer schema.
"""

from .orchestrator import RAGOrchestrator, build_cache_key, collect_sources
from .schema import RAGAnswer

__all__ = ["RAGOrchestrator", "RAGAnswer", "build_cache_key", "collect_sources"]
