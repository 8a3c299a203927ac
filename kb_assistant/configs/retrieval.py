"""
Retrieval configuration settings.

Operator-level knobs for the retrieval, ranking, context packing and
answer-caching pipeline. Read on every request through get_settings().

Dependencies: pydantic, pydantic_settings
System role: RAG pipeline tuning
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    """Retrieval pipeline configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    default_k: int = Field(default=5, description="Number of results when the caller omits k", ge=1)

    similarity_threshold: float = Field(
        default=0.7,
        description="Minimum similarity score for a candidate to be used",
    )
    fallback_threshold: float = Field(
        default=0.5,
        description="Looser threshold applied when nothing passes similarity_threshold",
    )

    use_mmr: bool = Field(default=False, description="Use max marginal relevance selection")
    mmr_fetch_k: int | None = Field(
        default=None,
        description="MMR candidate pool size (defaults to 4 * k)",
        ge=1,
    )
    mmr_lambda: float = Field(
        default=0.5,
        description="MMR trade-off: 0 maximises diversity, 1 maximises relevance",
        ge=0.0,
        le=1.0,
    )
    mmr_unmatched_score: float = Field(
        default=0.5,
        description="Score assigned to an MMR pick missing from the scored pool",
    )

    max_context_tokens: int = Field(
        default=2000,
        description="Token budget for the context packed into the prompt",
        ge=1,
    )
    max_history_messages: int = Field(
        default=6,
        description="Chat history messages included in the prompt (3 exchanges)",
        ge=0,
    )
    max_sources: int = Field(default=3, description="Sources returned with an answer", ge=1)

    cache_enabled: bool = Field(default=True, description="Cache generated answers")
    cache_ttl_seconds: float = Field(default=300.0, description="Answer cache TTL", gt=0)
    cache_max_entries: int = Field(default=50, description="Answer cache capacity", ge=1)
