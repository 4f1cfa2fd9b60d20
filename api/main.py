from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
from redis import asyncio as redis_async
from slowapi.errors import RateLimitExceeded

from api.observability import (
    configure_logging,
    monotonic_ms,
    new_request_id,
    request_log_fields,
    reset_request_id,
    set_request_id,
)
from api.ratelimit import limiter, rate_limit_exceeded_handler
from api.routes import router
from core.config import Settings, get_settings
from core.errors import MalformedInputError, WindowConfigError

logger = logging.getLogger(__name__)


async def _init_read_model_cache(app: FastAPI, settings: Settings) -> None:
    """Back the muscle-load and trend caches with Redis, or process memory when Redis is down."""
    client = redis_async.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    try:
        await client.ping()
    except Exception as exc:  # pragma: no cover - depends on runtime infra
        await client.aclose()
        logger.warning("Redis unavailable, caching read models in memory: %s", exc)
        FastAPICache.init(InMemoryBackend(), prefix=settings.cache_prefix)
        app.state.redis = None
        app.state.cache_backend = "memory"
        return
    FastAPICache.init(RedisBackend(client), prefix=settings.cache_prefix)
    app.state.redis = client
    app.state.cache_backend = "redis"


def _engine_error_handler(request: Request, exc: Exception) -> JSONResponse:
    code = "WINDOW_CONFIG" if isinstance(exc, WindowConfigError) else "MALFORMED_INPUT"
    logger.warning("engine_input_rejected", extra={"path": request.url.path, "code": code, "error": str(exc)})
    return JSONResponse(status_code=422, content={"detail": {"code": code, "message": str(exc)}})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await _init_read_model_cache(app, settings)
        logger.info(
            "load_engine_ready",
            extra={
                "cache_backend": app.state.cache_backend,
                "acute_days": settings.acute_days,
                "chronic_days": settings.chronic_days,
                "app_env": settings.app_env,
            },
        )
        try:
            yield
        finally:
            if app.state.redis is not None:
                await app.state.redis.aclose()

    app = FastAPI(title="Training Load & Readiness API", version="1.0.0", lifespan=lifespan)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(MalformedInputError, _engine_error_handler)
    app.add_exception_handler(WindowConfigError, _engine_error_handler)
    app.include_router(router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[settings.request_id_header_name],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next: Callable) -> Response:
        header_name = settings.request_id_header_name
        request_id = (request.headers.get(header_name) or "").strip() or new_request_id()
        token = set_request_id(request_id)
        started_ms = monotonic_ms()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[header_name] = request_id
            return response
        finally:
            fields = request_log_fields(
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=monotonic_ms() - started_ms,
                client_ip=getattr(request.client, "host", None),
            )
            if status_code >= 500:
                logger.error("http_request_failed", extra=fields)
            else:
                logger.info("http_request", extra=fields)
            reset_request_id(token)

    return app


app = create_app()
