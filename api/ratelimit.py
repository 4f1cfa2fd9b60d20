from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import get_settings
from core.logging_config import get_logger

logger = get_logger(__name__)


def _limiter_enabled() -> bool:
    settings = get_settings()
    if settings.app_env == "test":
        return False
    return settings.rate_limit_enabled


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=get_settings().rate_limit_storage_uri,
    enabled=_limiter_enabled(),
    headers_enabled=True,
)


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    limit = str(getattr(exc, "detail", "")) if isinstance(exc, RateLimitExceeded) else ""
    logger.warning("rate_limited", extra={"path": request.url.path, "limit": limit})
    return JSONResponse(
        status_code=429,
        content={"detail": {"code": "RATE_LIMITED", "message": f"Rate limit exceeded: {limit}".rstrip(": ")}},
    )
