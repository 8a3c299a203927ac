"""
Service-wide configuration.

Settings shared by the whole knowledge base service: runtime environment,
logging, the HTTP surface (API prefix, CORS origins) and the threshold
above which a request is logged as slow. Concern-specific settings live
in their own prefixed modules and are aggregated by Settings.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class BaseSettings(PydanticBaseSettings):
    """Unprefixed settings for the service process and its HTTP surface."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment environment (development, staging, production)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Root log level")
    app_version: str = Field(
        default="1.0.0",
        description="Version reported by the health endpoint and OpenAPI",
    )
    api_prefix: str = Field(
        default="/api/v1",
        description="Path prefix for every knowledge base route",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )
    slow_request_ms: float = Field(
        default=5000.0,
        gt=0,
        description="Requests slower than this are logged at WARNING",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    @field_validator("api_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value
