"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceContainer,
    get_chat_service,
    get_ingestion_service,
    get_search_service,
    get_service_container,
    get_settings_dependency,
    get_source_service,
)

__all__ = [
    "ServiceContainer",
    "get_chat_service",
    "get_ingestion_service",
    "get_search_service",
    "get_service_container",
    "get_settings_dependency",
    "get_source_service",
]
