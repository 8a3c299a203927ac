"""API routers."""

from .chat import router as chat_router
from .health import router as health_router
from .ingest import router as ingest_router
from .search import router as search_router
from .sources import router as sources_router

__all__ = [
    "chat_router",
    "health_router",
    "ingest_router",
    "search_router",
    "sources_router",
]
