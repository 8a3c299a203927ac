"""
LLM configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Chat model configuration for answer generation
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Chat model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="gemini-2.5-flash", description="Google Gemini chat model ID")
    temperature: float = Field(
        default=0.3,
        description="Sampling temperature, kept low to stay close to the retrieved facts",
        ge=0.0,
        le=2.0,
    )
    timeout_seconds: float = Field(default=60.0, description="Request timeout", gt=0)
    max_retries: int = Field(
        default=0,
        description="Provider-level retries; failures surface to the caller",
        ge=0,
    )
