"""
Page fetcher configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Web page retrieval configuration for ingestion
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CrawlerSettings(BaseSettings):
    """HTTP fetch settings for ingestion."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CRAWLER_",
        case_sensitive=False,
        extra="ignore",
    )

    timeout_seconds: float = Field(default=30.0, description="Page fetch timeout", gt=0)
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; KnowledgeBaseCrawler/1.0)",
        description="User-Agent header sent with fetches",
    )
    min_content_chars: int = Field(
        default=100,
        description="Minimum text length for a content container to be accepted",
        ge=0,
    )
