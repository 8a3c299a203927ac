"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers, middleware, error handlers
and the service container, and configures the uvicorn server.

Dependencies: fastapi, uvicorn, python-dotenv, kb_assistant.api, kb_assistant.observability
System role: API entry point with router assembly and server launch
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from kb_assistant.api import api_router
from kb_assistant.api.deps import ServiceContainer
from kb_assistant.api.errors import request_validation_handler
from kb_assistant.observability.logger import configure_logging
from kb_assistant.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

# Provider SDKs read GOOGLE_API_KEY from the environment
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    services: ServiceContainer = app.state.services
    configure_logging(services.settings.log_level)

    # Startup
    logger.info(f"{__name__}:lifespan - Pre-warming services...")
    services.prewarm()
    logger.info(f"{__name__}:lifespan - Services pre-warmed")

    yield

    # Shutdown
    services.clear()
    logger.info(f"{__name__}:lifespan - Services cleared")


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        services: Service container (built from settings when omitted)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    services = services or ServiceContainer()
    settings = services.settings

    app = FastAPI(
        title="Knowledge Base Assistant API",
        description="Ingest web pages and answer questions from them with RAG",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.services = services
    app.state.started_at = time.monotonic()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: correlation id is set before request logging
    app.add_middleware(RequestLoggingMiddleware, slow_request_ms=settings.slow_request_ms)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register all routers under the versioned prefix
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "kb_assistant.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
