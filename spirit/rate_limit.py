"""
Rate limiter (in-memory sliding window), keyed by client address.

Tracked per process; several server processes each keep their own windows.
"""

import logging
import time
from typing import Callable, Dict, List

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from spirit.errors import ErrorKind, error_response

logger = logging.getLogger(__name__)

_RATE_WINDOW_SECONDS = 60

# Health checks are never limited
_EXEMPT_PATHS = frozenset({"/"})


class SlidingWindowLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float = _RATE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, List[float]] = {}
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        """Return True if request is allowed, False if rate-limited."""
        now = self._clock()
        cutoff = now - self.window_seconds
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(cutoff)
            self._last_sweep = now

        # Remove timestamps outside the window
        window = [t for t in self._windows.get(key, ()) if t > cutoff]

        if len(window) >= self.limit:
            self._windows[key] = window
            return False

        window.append(now)
        self._windows[key] = window
        return True

    def _sweep(self, cutoff: float) -> None:
        """Forget clients with no request inside the current window."""
        idle = [k for k, w in self._windows.items() if not w or w[-1] <= cutoff]
        for key in idle:
            del self._windows[key]

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)


def client_key(request: Request, trust_forwarded_for: bool = False) -> str:
    """Client address; behind a reverse proxy, the first X-Forwarded-For hop."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: SlidingWindowLimiter, trust_forwarded_for: bool = False):
        super().__init__(app)
        self.limiter = limiter
        self.trust_forwarded_for = trust_forwarded_for

    async def dispatch(self, request: Request, call_next):
        if request.url.path in _EXEMPT_PATHS or self.limiter.limit <= 0:
            return await call_next(request)

        client = client_key(request, self.trust_forwarded_for)
        if not self.limiter.allow(client):
            logger.warning("Rate limit exceeded for %s on %s", client, request.url.path)
            return error_response(ErrorKind.RATE_LIMITED)

        return await call_next(request)
