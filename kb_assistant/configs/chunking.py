"""
Chunking configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Ingestion chunk sizing
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChunkingSettings(BaseSettings):
    """Text splitter configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNK_",
        case_sensitive=False,
        extra="ignore",
    )

    max_tokens: int = Field(default=600, description="Chunk size in tokens (1 token ~ 4 chars)", ge=1)
    overlap_percent: float = Field(
        default=0.2,
        description="Fraction of the chunk size shared with the next chunk",
        ge=0.0,
        lt=1.0,
    )
    max_keywords: int = Field(default=5, description="Keywords stored per chunk", ge=0)
