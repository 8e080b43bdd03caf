"""
MoodJourney Backend — Request ID Middleware
============================================

What:  Assigns an ID to each incoming request and echoes it back in the
       X-Request-ID response header.
How:   Reuses the client's X-Request-ID when it is a short token of
       letters, digits, '.', '_' or '-'; otherwise generates a short UUID.
       The ID lives in a ContextVar so loggers and exception handlers can
       read it without having the Request object.

The ID is copied into log lines and error bodies, so a client-supplied
value must not be able to inject newlines or flood the logs.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(client_value: Optional[str]) -> str:
    """The client's ID when well-formed, else a fresh 8-char one."""
    if client_value and _CLIENT_ID_PATTERN.match(client_value):
        return client_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var and request.state.request_id for every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
