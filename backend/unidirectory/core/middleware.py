"""
UniDirectory - HTTP middleware

Opens the per-request log context, times the request and stamps the
response with the request id, timing and security headers.
"""

import time
from typing import Callable, Dict, FrozenSet

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from unidirectory.core.logging_config import (
    end_log_context,
    logger,
    new_request_id,
    start_log_context,
)


# Probes and docs: no completion line
QUIET_PATHS: FrozenSet[str] = frozenset({
    "/",
    "/api/health",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
})

SLOW_REQUEST_MS = 1000

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    One log context per request.

    Handlers add to it with ``bind_log_context`` (the search filter, the
    favorite id being deleted...), so the completion line logged here
    says what the request actually touched. A client-supplied
    ``X-Request-ID`` is reused for correlation.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or new_request_id()
        token = start_log_context(request_id)
        started = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - started) * 1000

            if path not in QUIET_PATHS:
                logger.log_http(request.method, path, response.status_code, duration_ms)
                if duration_ms > SLOW_REQUEST_MS:
                    logger.log_slow(f"{request.method} {path}", duration_ms, SLOW_REQUEST_MS)
        finally:
            end_log_context(token)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        response.headers.update(SECURITY_HEADERS)
        return response


__all__ = [
    "RequestContextMiddleware",
    "QUIET_PATHS",
    "SECURITY_HEADERS",
]
