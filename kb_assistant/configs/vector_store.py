"""
Vector store configuration settings.

Selects the vector index backend and the embedding model used to populate it.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (in-memory for dev/tests, FAISS on disk otherwise)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="memory",
        description="Vector store type: 'memory' (process-local) or 'faiss' (persisted to disk)",
    )
    persist_directory: str = Field(
        default=".faiss_index",
        description="Directory holding the FAISS index files",
    )
    index_name: str = Field(default="knowledgebase-index", description="Index name")

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    query_timeout_seconds: float = Field(
        default=30.0,
        description="Upper bound for a single retrieval round-trip",
        gt=0,
    )
