from __future__ import annotations

import time
import uuid

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

log = structlog.get_logger()


class RequestIDMiddleware:
    """Tags every HTTP request with an id.

    The id is returned in the `x-request-id` header and bound into the
    structlog context for the duration of the request.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        request_id = uuid.uuid4().hex
        scope.setdefault("state", {})
        scope["state"]["request_id"] = request_id

        start = time.perf_counter()

        async def send_wrapper(message):
            if message.get("type") == "http.response.start":
                headers = message.setdefault("headers", [])
                headers.append((b"x-request-id", request_id.encode()))
            await send(message)

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                await self.app(scope, receive, send_wrapper)
            finally:
                dur_ms = int((time.perf_counter() - start) * 1000)
                log.info(
                    "request_completed",
                    method=scope.get("method", ""),
                    path=scope.get("path", ""),
                    duration_ms=dur_ms,
                )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    req_id = getattr(getattr(request, "state", None), "request_id", None) or ""
    log.error("unhandled_exception", path=request.url.path, error=str(exc))
    body = {"error": {"code": "internal_error", "message": str(exc), "request_id": req_id}}
    # Header added by RequestIDMiddleware; avoid duplicates here
    return JSONResponse(status_code=500, content=body)
