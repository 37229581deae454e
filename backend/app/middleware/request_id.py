"""
Portfolio Backend — Request ID Middleware
===========================================

What:  Assigns a correlation ID to each request and returns it in X-Request-ID.
How:   Reuses a sanitized inbound X-Request-ID header, otherwise generates a short UUID;
       stores it in a ContextVar (for loggers and error bodies) and on
       request.state (for handlers).
Who:   Outermost application middleware; runs before everything else.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

MAX_REQUEST_ID_LENGTH = 64
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9-]")


def sanitize_request_id(value: str) -> str:
    """Inbound IDs reach logs and headers: keep [A-Za-z0-9-], at most 64 chars."""
    return _UNSAFE_CHARS.sub("", value)[:MAX_REQUEST_ID_LENGTH]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = sanitize_request_id(request.headers.get("X-Request-ID", "")) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
