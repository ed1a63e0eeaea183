"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from netvlyx.infrastructure.config import AppConfig
from netvlyx.interfaces.api.middleware import (
    RateLimitMiddleware,
    SameOriginGuardMiddleware,
)
from netvlyx.interfaces.app_state import AppState
from netvlyx.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"
PROTECTED_PATHS = (
    f"{API_PREFIX}/extract",
    f"{API_PREFIX}/drive",
    f"{API_PREFIX}/metadata",
    f"{API_PREFIX}/resolve",
)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, template registry, use cases) are created in
    lifespan().
    """
    app = FastAPI(
        title="NetVlyx",
        description="HTML-to-structured-data extraction for download aggregator pages",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    if config.origin_guard_enabled:
        app.add_middleware(
            SameOriginGuardMiddleware,
            protected_prefixes=PROTECTED_PATHS,
            allowed_origins=config.allowed_origins,
            allow_missing=config.environment in ("dev", "test"),
        )

    # API rate limiting (per-IP sliding window)
    if config.api_rate_limit_rpm > 0:
        app.add_middleware(
            RateLimitMiddleware, requests_per_minute=config.api_rate_limit_rpm
        )

    from netvlyx.interfaces.api.extract.router import router as extract_router
    from netvlyx.interfaces.api.metadata.router import router as metadata_router
    from netvlyx.interfaces.api.resolve.router import router as resolve_router
    from netvlyx.interfaces.api.templates.router import router as templates_router

    app.include_router(extract_router, prefix=API_PREFIX)
    app.include_router(metadata_router, prefix=API_PREFIX)
    app.include_router(resolve_router, prefix=API_PREFIX)
    app.include_router(templates_router, prefix=API_PREFIX)

    @app.get(f"{API_PREFIX}/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness check: returns 200 as long as the process is running."""
        templates = getattr(app.state, "templates", None)
        return {
            "status": "ok",
            "templates": len(templates.list_names()) if templates else 0,
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
