"""
API error handling utilities.

Provides a decorator and exception handlers that turn domain errors into
the JSON failure envelope {success: false, message, details}.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kb_assistant.core.exceptions import (
    ExtractionError,
    KnowledgeBaseError,
    UpstreamError,
    ValidationError,
)
from kb_assistant.models.common import ErrorResponse

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def error_response(status_code: int, message: str, details: dict | None = None) -> JSONResponse:
    """Build a failure envelope response."""
    body = ErrorResponse(message=message, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def status_for(error: KnowledgeBaseError) -> int:
    """HTTP status for a domain error."""
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, ExtractionError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, UpstreamError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_api_errors(operation: str) -> Callable[[F], F]:
    """
    Decorator to map domain errors raised by a route to failure envelopes.

    This centralizes:
    - Logging of errors with the failing operation
    - Mapping exception types to HTTP status codes
    - Uniform {success, message, details} bodies

    Args:
        operation: Human-readable operation name used in messages ("Ingestion")
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)

            except (ValidationError, ExtractionError) as e:
                logger.warning(f"{__name__}:{func.__name__} - {type(e).__name__}: {e}")
                return error_response(status_for(e), e.message, e.details)

            except UpstreamError as e:
                logger.warning(f"{__name__}:{func.__name__} - {type(e).__name__}: {e}")
                return error_response(
                    status_for(e), f"{operation} failed: {e.message}", e.details
                )

            except KnowledgeBaseError as e:
                logger.exception(f"{__name__}:{func.__name__} - {type(e).__name__}")
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    f"{operation} failed: {e.message}",
                    e.details,
                )

            except Exception as e:
                logger.exception(f"{__name__}:{func.__name__} - Unexpected failure")
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    f"{operation} failed: {e}",
                )

        return wrapper  # type: ignore

    return decorator


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return malformed request bodies as a 400 failure envelope."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    logger.warning(f"{__name__}:request_validation_handler - {request.url.path}: {message}")
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        message,
        {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]},
    )
