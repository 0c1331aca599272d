"""
Campaign Service Middleware

Request timing logs, store-availability gate, and the JSON error body
shared by every error response.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .models import ErrorResponse

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE_MESSAGE = "Service temporarily unavailable - database connection issue"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[Dict[str, List[str]]] = None,
) -> JSONResponse:
    """Build the standard error body: message, status, timestamp, path[, errors]"""
    body = ErrorResponse(
        message=message,
        status=status_code,
        timestamp=datetime.now(timezone.utc),
        path=request.url.path,
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request"""

    def __init__(self, app, slow_request_seconds: float = 3.0):
        super().__init__(app)
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        message = f"{request.method} {request.url.path} {response.status_code} {elapsed * 1000:.1f}ms"
        if elapsed >= self.slow_request_seconds:
            logger.warning(f"Slow request: {message}")
        else:
            logger.info(message)
        return response


class StoreAvailabilityMiddleware(BaseHTTPMiddleware):
    """
    Reject requests with 503 while the database is not connected.

    Exempt paths (liveness and status checks) always pass through.
    """

    def __init__(
        self,
        app,
        is_available: Callable[[], bool],
        exempt_paths: Iterable[str] = ("/health", "/status"),
    ):
        super().__init__(app)
        self.is_available = is_available
        self.exempt_paths = set(exempt_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in self.exempt_paths or self.is_available():
            return await call_next(request)

        logger.warning(f"Rejecting {request.method} {request.url.path}: database not connected")
        return error_response(request, status.HTTP_503_SERVICE_UNAVAILABLE, STORE_UNAVAILABLE_MESSAGE)


__all__ = [
    "STORE_UNAVAILABLE_MESSAGE",
    "error_response",
    "RequestTimingMiddleware",
    "StoreAvailabilityMiddleware",
]
