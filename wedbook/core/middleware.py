"""Request logging and response header middleware."""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from wedbook.config import settings

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0

READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log who changed which booking, how it ended and how long it took.

    Every state-changing request is logged at INFO with the acting party
    from X-Actor-Role, so the log reads as an audit trail next to the
    status history. Conflicts (409) are logged at WARNING since they mean
    two parties raced on the same booking. Reads are only logged in debug.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()

        request_id = request.headers.get("X-Request-ID") or str(time.time_ns())
        actor_role = request.headers.get("X-Actor-Role", "-").strip().lower() or "-"
        request.state.request_id = request_id
        request.state.actor_role = actor_role

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        line = (
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"actor={actor_role} in {duration:.3f}s request_id={request_id}"
        )
        if duration > SLOW_REQUEST_SECONDS:
            logger.warning(f"SLOW REQUEST: {line}")
        elif response.status_code == 409:
            logger.warning(f"Booking conflict: {line}")
        elif request.method not in READ_METHODS:
            logger.info(line)
        elif settings.debug:
            logger.debug(line)

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if not settings.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response
