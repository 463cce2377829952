"""
Request Context Middleware.

Middleware for request tracking, timing, and context propagation.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.logging import VALID_SOURCES, get_logger
from modules.backend.core.utils import utc_now

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds request context to every request.

    - Generates or propagates request ID (X-Request-ID header)
    - Extracts the calling frontend (X-Frontend-ID header), see VALID_SOURCES
    - Records request timing (X-Response-Time header)
    - Binds request context to structlog for automatic inclusion in logs

    Access in endpoints:
        request.state.request_id
        request.state.source
        request.state.start_time
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request with context tracking."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        source = request.headers.get("X-Frontend-ID", "unknown").lower()
        if source not in VALID_SOURCES:
            source = "unknown"

        start_time = utc_now()

        request.state.request_id = request_id
        request.state.source = source
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            source=source,
            method=request.method,
            path=request.url.path,
        )

        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)

            duration_ms = int((utc_now() - start_time).total_seconds() * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            logger.debug(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
            return response

        except Exception as exc:
            duration_ms = int((utc_now() - start_time).total_seconds() * 1000)
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                },
            )
            raise

        finally:
            # Prevent context leaking into the next request on this worker
            structlog.contextvars.clear_contextvars()
