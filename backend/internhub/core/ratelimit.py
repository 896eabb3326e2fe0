from collections import deque
from datetime import datetime, timedelta
from threading import Lock

from fastapi import HTTPException

from internhub.core.config import settings


class RateLimiter:
    """In-process sliding-window limiter keyed by caller-chosen strings."""

    def __init__(self, limit: int, window_seconds: int):
        self.limit = limit
        self.window = timedelta(seconds=window_seconds)
        self._hits: dict[str, deque[datetime]] = {}
        self._lock = Lock()

    def check(self, key: str) -> None:
        now = datetime.utcnow()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] < now - self.window:
                hits.popleft()
            if len(hits) >= self.limit:
                retry_after = max(1, int((hits[0] + self.window - now).total_seconds()))
                raise HTTPException(
                    status_code=429,
                    detail="Too many attempts, try again later",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)

    def clear(self, key: str) -> None:
        with self._lock:
            self._hits.pop(key, None)


ai_rate_limiter = RateLimiter(limit=10, window_seconds=60)
auth_login_rate_limiter = RateLimiter(
    limit=settings.auth_login_max_attempts,
    window_seconds=settings.auth_login_window_seconds,
)
