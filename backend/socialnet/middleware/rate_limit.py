"""
SocialNet Backend — Rate Limiting Middleware
==============================================

What:  Per-IP sliding window limiter: at most `rate_limit_requests` requests
       in any `rate_limit_window` seconds (default 500 per 15 minutes).
How:   Keeps a deque of request timestamps per client IP. Timestamps older
       than the window are dropped on each request; a full deque means 429
       with a Retry-After header and the standard error envelope. Runs inside
       RequestIDMiddleware, so the 429 body carries the request ID.

State is per process. Several uvicorn workers each enforce their own quota.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from socialnet.config import settings
from socialnet.exceptions import RateLimitExceededError
from socialnet.responses import error_response

logger = logging.getLogger(__name__)

# Inactive IPs are swept after this many recorded requests
CLEANUP_INTERVAL = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._since_cleanup = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        retry_after = self.hit(client_ip)
        if retry_after is not None:
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                self.max_requests,
                self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return error_response(
                exc.status_code,
                exc.error_code,
                exc.message,
                details=exc.context,
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

    def hit(self, client_ip: str) -> Optional[int]:
        """
        Records one request from `client_ip`.

        Returns None when the request is allowed, otherwise the number of
        seconds until the oldest request in the window expires.
        """
        now = self._clock()
        window_start = now - self.window_seconds
        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.max_requests:
            return int(timestamps[0] + self.window_seconds - now) + 1

        timestamps.append(now)
        self._since_cleanup += 1
        if self._since_cleanup >= CLEANUP_INTERVAL:
            self._cleanup_inactive_ips(window_start)
        return None

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        self._since_cleanup = 0
        inactive = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive:
            del self._requests[ip]
        if inactive:
            logger.debug("Dropped %d inactive IP entries", len(inactive))
