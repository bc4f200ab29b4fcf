# app/middleware/request_id.py
from __future__ import annotations

"""
# VidShare · Request ID Middleware (pure ASGI)

- Reuses a client-supplied `X-Request-ID` when it is a short, safe token.
- Generates a UUIDv4 otherwise.
- Stores it on `request.state.request_id` and echoes it on the response.
- Binds `request_id` into the **loguru** context for the whole request, so
  every log line (including intercepted stdlib ones) carries it.
- Emits one access line per request: method, path, status, duration.

## Env
- `REQUEST_ID_HEADER_NAME` (default: `X-Request-ID`)
- `REQUEST_ID_TRUST_CLIENT_IDS` ("true"/"false"; default: "true")
"""

import os
import re
import time
import uuid

from loguru import logger
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER_NAME = os.getenv("REQUEST_ID_HEADER_NAME", "X-Request-ID")
TRUST_CLIENT_IDS = os.getenv("REQUEST_ID_TRUST_CLIENT_IDS", "true").lower() == "true"

# Letters, digits, dash, underscore; bounded to keep log lines clean
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


def choose_request_id(incoming: str | None) -> str:
    """Return `incoming` when trusted and well-formed, else a fresh UUIDv4."""
    if TRUST_CLIENT_IDS and incoming:
        candidate = incoming.strip()
        if _SAFE_ID_RE.fullmatch(candidate):
            return candidate
    return str(uuid.uuid4())


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = HEADER_NAME) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        req_id = choose_request_id(Headers(scope=scope).get(self.header_name))
        scope.setdefault("state", {})["request_id"] = req_id

        started = time.perf_counter()
        status_code = 500
        name_bytes = self.header_name.lower().encode("latin-1")

        async def _send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = [(k, v) for (k, v) in message.get("headers", []) if k.lower() != name_bytes]
                headers.append((self.header_name.encode("latin-1"), req_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        with logger.contextualize(request_id=req_id):
            try:
                await self.app(scope, receive, _send)
            finally:
                elapsed_ms = (time.perf_counter() - started) * 1000
                logger.info(
                    "{} {} -> {} ({:.1f} ms)",
                    scope.get("method"),
                    scope.get("path"),
                    status_code,
                    elapsed_ms,
                )


def get_request_id(request) -> str:
    """Current request id from `request.state` ("" when absent)."""
    return getattr(getattr(request, "state", object()), "request_id", "") or ""


__all__ = ["RequestIDMiddleware", "choose_request_id", "get_request_id"]
