"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    chat_router,
    health_router,
    ingest_router,
    search_router,
    sources_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(ingest_router)
api_router.include_router(chat_router)
api_router.include_router(search_router)
api_router.include_router(sources_router)

__all__ = ["api_router"]
