"""Request context middleware.

- RequestIdMiddleware: unique request IDs for tracing
- PrincipalContextMiddleware: binds the token subject to the log context
"""

import uuid
from typing import TYPE_CHECKING

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from sekolah.core.auth.backend import decode_token


if TYPE_CHECKING:
    from starlette.types import ASGIApp


class PrincipalContextMiddleware(BaseHTTPMiddleware):
    """Middleware that records who is calling.

    Decodes the bearer token (if present) and stores its subject on
    ``request.state.auth_id`` and in the structlog context. Requests
    without a valid token pass through untouched; enforcement happens in
    the route dependencies.
    """

    def __init__(
        self,
        app: "ASGIApp",
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token_data = decode_token(auth_header.split(" ", 1)[1])
            if token_data:
                request.state.auth_id = token_data.auth_id
                structlog.contextvars.bind_contextvars(auth_id=token_data.auth_id)

        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request ID to each request.

    The request ID is added to:
    - request.state.request_id
    - Response header X-Request-ID
    - Structlog context
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = request_id  # Alias for error handler

        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "auth_id")

        response.headers["X-Request-ID"] = request_id
        return response
