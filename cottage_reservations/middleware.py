"""
FastAPI middleware for request tracing and log correlation.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that tags each HTTP request with a request ID.

    The ID is taken from an incoming X-Request-ID header when the caller (for
    example the web client or a proxy) supplies one, otherwise a UUID4 is
    generated. It is:
    1. Stored in request.state.request_id for route handlers
    2. Bound into structlog contextvars so every log line of the request carries it
    3. Echoed back in the X-Request-ID response header

    Example:
        >>> app.add_middleware(RequestIDMiddleware)
        >>> # Response headers will include:
        >>> # X-Request-ID: 550e8400-e29b-41d4-a716-446655440000
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
