"""Request context propagation for structured logging.

Assigns every HTTP request an identifier (reusing an inbound X-Request-ID
when it is a short alphanumeric token), resets structlog's context
variables and binds the request metadata so every log event emitted while
serving the request carries it.
The tenant resolver later binds tenant and principal ids the same way.
"""

from __future__ import annotations

import re

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

# Inbound ids outside this shape are replaced rather than logged
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9-]{1,64}")


class RequestContextMiddleware:
    """Pure ASGI middleware binding request-scoped logging context."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        self.app = app
        self._header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self._header_name, "")
        if not REQUEST_ID_PATTERN.fullmatch(request_id):
            request_id = str(ULID())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=scope["method"],
            path=scope["path"],
        )

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self._header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            structlog.contextvars.clear_contextvars()
