"""
FastAPI middleware for observability.

Correlation ID injection and per-request logging tagged with the
route operation and correlation id.

Dependencies: fastapi, starlette, kb_assistant.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from kb_assistant.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per knowledge base request.

    The completion line names the route operation (the endpoint function,
    e.g. ingest or chat) and carries the correlation id, so a slow or
    failing ingest can be told apart from a slow chat. Requests slower
    than slow_request_ms are logged at WARNING.
    """

    def __init__(self, app, slow_request_ms: float = 5000.0) -> None:
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next):
        """
        Log HTTP request and response with timing.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response object
        """
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        logger.debug(
            f"{method} {path}",
            extra={
                "method": method,
                "path": path,
                "client_host": request.client.host if request.client else None,
            },
        )

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - {type(e).__name__}",
                extra=self._context(request, start_time, error_type=type(e).__name__),
            )
            raise

        context = self._context(request, start_time, status_code=response.status_code)
        slow = context["process_time_ms"] >= self.slow_request_ms
        logger.log(
            logging.WARNING if slow else logging.INFO,
            f"{method} {path} [{context['operation'] or '-'}] - {response.status_code} "
            f"in {context['process_time_ms']}ms{' (slow)' if slow else ''}",
            extra=context,
        )
        return response

    @staticmethod
    def _context(request: Request, start_time: float, **fields) -> dict:
        # The router stores the matched endpoint in the shared scope
        endpoint = request.scope.get("endpoint")
        return {
            "method": request.method,
            "path": request.url.path,
            "operation": getattr(endpoint, "__name__", None),
            "correlation_id": get_correlation_id() or None,
            "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            **fields,
        }


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation ID injection."""

    async def dispatch(self, request: Request, call_next):
        """
        Inject correlation ID into request context.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
