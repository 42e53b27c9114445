# goal_tracker/core/rate_limit.py
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from goal_tracker.core.errors import SERVER_ERROR, envelope_error

logger = logging.getLogger(__name__)

DEFAULT_CLIENT = "127.0.0.1"

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline' 'unsafe-eval'; "
        "style-src 'self' 'unsafe-inline';"
    ),
}


@dataclass
class Window:
    count: int
    started_at: float


class RateLimiter:
    """Fixed-window request counter keyed by caller.

    The map is bounded by ``max_clients``: expired windows are swept when a
    new caller would overflow it, then the least recently seen caller goes.
    """

    def __init__(
        self,
        limit: int = 100,
        window_seconds: float = 60.0,
        max_clients: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self.clock = clock
        self._windows: "OrderedDict[str, Window]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, key: str) -> bool:
        return key in self._windows

    def reset(self) -> None:
        self._windows.clear()

    def hit(self, key: str, now: Optional[float] = None) -> bool:
        """Count one request for ``key``; False means it is over quota."""
        now = self.clock() if now is None else now
        window = self._windows.get(key)

        if window is None:
            self._make_room(now)
            self._windows[key] = Window(count=1, started_at=now)
            return True

        self._windows.move_to_end(key)
        if now - window.started_at > self.window_seconds:
            window.count = 1
            window.started_at = now
            return True
        if window.count >= self.limit:
            return False
        window.count += 1
        return True

    def _make_room(self, now: float) -> None:
        if len(self._windows) < self.max_clients:
            return
        expired = [k for k, w in self._windows.items() if now - w.started_at > self.window_seconds]
        for k in expired:
            del self._windows[k]
        while len(self._windows) >= self.max_clients:
            self._windows.popitem(last=False)


def get_client_ip(request: Request, trust_forwarded: bool = True) -> str:
    """First hop of X-Forwarded-For, then the socket peer, then localhost.

    X-Forwarded-For is client-controlled unless a proxy in front rewrites it;
    pass trust_forwarded=False when the app is reachable directly.
    """
    forwarded = request.headers.get("x-forwarded-for") if trust_forwarded else None
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return DEFAULT_CLIENT


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: RateLimiter, path_prefix: str = "/api", trust_forwarded: bool = True):
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix
        self.trust_forwarded = trust_forwarded

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.path_prefix):
            client_ip = get_client_ip(request, self.trust_forwarded)
            if not self.limiter.hit(client_ip):
                logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
                response = JSONResponse(
                    status_code=429,
                    content={"success": False, "message": "Too many requests"},
                )
                response.headers.update(SECURITY_HEADERS)
                return response

        try:
            response = await call_next(request)
        except Exception:
            # headers go on every response, 500s included
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = envelope_error(500, SERVER_ERROR)
        response.headers.update(SECURITY_HEADERS)
        return response
