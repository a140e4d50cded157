"""
Rate Limiting for UniDirectory
==============================
slowapi limiter keyed by client address. Only the login endpoint carries a
limit (brute force protection); storage defaults to in-process memory and
can point at Redis through RATE_LIMIT_STORAGE_URI.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from unidirectory.core.config import settings
from unidirectory.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: client IP address"""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)



async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render 429 in the standard error envelope"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}",
        extra={"event_type": "rate_limited", "http_path": request.url.path},
    )

    return JSONResponse(
        status_code=429,
        content={
            "statusCode": 429,
            "error": "Too many requests",
        },
        headers={"Retry-After": "60"},
    )
