"""Per-address request limiting.

Every requester gets a fixed window of ``max_requests`` requests. Requests
are keyed on the same address the voter id is derived from, so one client
cannot cast votes faster than the limit allows.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from thought_dump.core.settings import settings
from thought_dump.services.identity import UNKNOWN_ADDRESS, client_address

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of counting one request against its window."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after: int | None = None

    def to_headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers


@dataclass
class FixedWindowLimiter:
    """In-process fixed-window counter per key.

    Windows are aligned to multiples of ``window_seconds``. State lives in
    this process only, so each worker enforces its own limit.
    """

    window_seconds: float
    max_requests: int
    clock: Callable[[], float] = time.time
    _windows: dict[str, tuple[float, int]] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def hit(self, key: str) -> RateLimitResult:
        """Count one request for ``key`` and report whether it may proceed."""
        now = self.clock()
        window_start = (now // self.window_seconds) * self.window_seconds
        reset_at = window_start + self.window_seconds
        with self._lock:
            started, used = self._windows.get(key, (window_start, 0))
            if started != window_start:
                used = 0
            if used >= self.max_requests:
                self._windows[key] = (window_start, used)
                return RateLimitResult(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    reset_at=int(reset_at),
                    retry_after=max(1, int(reset_at - now + 0.999)),
                )
            used += 1
            self._windows[key] = (window_start, used)
        return RateLimitResult(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - used,
            reset_at=int(reset_at),
        )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over the per-address limit with 429 ``RATE_LIMITED``."""

    def __init__(
        self,
        app: ASGIApp,
        limiter: FixedWindowLimiter,
        *,
        enabled: bool = True,
        excluded_paths: tuple[str, ...] = DEFAULT_EXCLUDED_PATHS,
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.enabled = enabled
        self.excluded_paths = excluded_paths

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(excluded) for excluded in self.excluded_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.enabled or self._is_excluded(request.url.path):
            return await call_next(request)

        address = client_address(request, trust_forwarded_for=settings.trust_forwarded_for)
        result = self.limiter.hit(address or UNKNOWN_ADDRESS)
        if not result.allowed:
            logger.warning("Rate limit exceeded for %s on %s", address, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "message": "Too many requests from this IP, please try again later.",
                    "code": "RATE_LIMITED",
                },
                headers=result.to_headers(),
            )

        response = await call_next(request)
        for header, value in result.to_headers().items():
            response.headers[header] = value
        return response
