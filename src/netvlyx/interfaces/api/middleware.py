"""FastAPI middleware for API rate limiting and same-origin protection."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Iterable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

log = structlog.get_logger(__name__)

# Dispatch cycles between sweeps of idle client entries.
_GC_INTERVAL = 256

UNAUTHORIZED_MESSAGE = (
    "Unauthorized access. This API can only be accessed from our website."
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiter per client IP.

    Args:
        app: ASGI application.
        requests_per_minute: Max requests per IP per minute. 0 = unlimited.
    """

    def __init__(self, app: object, requests_per_minute: int = 120) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._rpm = requests_per_minute
        self._window: dict[str, deque[float]] = {}
        self._dispatch_count = 0

    def _sweep(self, now: float) -> None:
        """Every ``_GC_INTERVAL`` dispatches, drop expired stamps for all IPs."""
        self._dispatch_count += 1
        if self._dispatch_count < _GC_INTERVAL:
            return
        self._dispatch_count = 0
        cutoff = now - 60.0
        for ip in list(self._window):
            stamps = self._window[ip]
            while stamps and stamps[0] <= cutoff:
                stamps.popleft()
            if not stamps:
                del self._window[ip]

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._rpm <= 0:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        stamps = self._window.setdefault(client_ip, deque())
        while stamps and stamps[0] <= now - 60.0:
            stamps.popleft()

        if len(stamps) >= self._rpm:
            log.warning("rate_limit_exceeded", client_ip=client_ip, rpm=self._rpm)
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded", "retry_after_seconds": 60},
                headers={
                    "Retry-After": "60",
                    "X-RateLimit-Limit": str(self._rpm),
                    "X-RateLimit-Remaining": "0",
                },
            )

        stamps.append(now)
        self._sweep(now)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._rpm)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self._rpm - len(stamps)))
        return response


class SameOriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject browser calls to protected paths that come from another site.

    ``Origin`` must equal ``https://{host}``, ``http://{host}`` or one of
    *allowed_origins*; failing that, ``Referer`` must start with one of
    them. Requests carrying neither header pass only when
    *allow_missing* is set (dev/test).
    """

    def __init__(
        self,
        app: object,
        *,
        protected_prefixes: Iterable[str],
        allowed_origins: Iterable[str] = (),
        allow_missing: bool = False,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._prefixes = tuple(protected_prefixes)
        self._extra = tuple(o.rstrip("/") for o in allowed_origins if o)
        self._allow_missing = allow_missing

    def _allowed(self, request: Request) -> tuple[str, ...]:
        host = request.headers.get("host", "")
        own = (f"https://{host}", f"http://{host}") if host else ()
        return (*own, *self._extra)

    def is_allowed(self, request: Request) -> bool:
        origin = request.headers.get("origin")
        referer = request.headers.get("referer")
        if not origin and not referer:
            return self._allow_missing
        allowed = self._allowed(request)
        if origin and origin.rstrip("/") in allowed:
            return True
        return bool(referer) and any(referer.startswith(a) for a in allowed)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(self._prefixes) or self.is_allowed(request):
            return await call_next(request)

        log.warning(
            "origin_rejected",
            path=request.url.path,
            origin=request.headers.get("origin"),
            referer=request.headers.get("referer"),
        )
        return JSONResponse(status_code=403, content={"error": UNAUTHORIZED_MESSAGE})
