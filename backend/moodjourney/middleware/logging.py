"""
MoodJourney Backend — Request Logging Middleware
=================================================

What:  One access log line per API request.
How:   Measures wall time around the downstream app and logs method, path,
       status, duration, request ID and client IP.

Log level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Not logged: health probes, and request bodies or query strings (journal
text and usernames are personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from moodjourney.middleware.request_id import request_id_var

logger = logging.getLogger("moodjourney.access")

HEALTH_SUFFIX = "/v1/health"


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request except liveness probes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        # Probes hit this every few seconds
        if path.endswith(HEALTH_SUFFIX):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
