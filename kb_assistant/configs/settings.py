"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from kb_assistant.configs.base import BaseSettings
from kb_assistant.configs.chunking import ChunkingSettings
from kb_assistant.configs.crawler import CrawlerSettings
from kb_assistant.configs.llm import LLMSettings
from kb_assistant.configs.retrieval import RetrievalSettings
from kb_assistant.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    crawler: CrawlerSettings = Field(default_factory=CrawlerSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from kb_assistant.configs import get_settings
        settings = get_settings()
    """
    return Settings()
