"""Fixed-window rate limiting dependency

Counters live in Redis; when Redis is unreachable a process-local counter
takes over so requests are still limited per instance.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from fastapi import Depends, Request

from libs.result import Error
from src.api.error import ClientError
from src.api.request_logging import log_warn
from src.app.services.identity_provider import Principal
from src.depends import get_principal

logger = logging.getLogger(__name__)


class LocalWindowCounter:
    """
    In-memory fixed windows keyed by client

    Windows whose expiry has passed are evicted on every hit, so the map
    only holds clients seen during the current window.
    """

    def __init__(self):
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, key: str) -> bool:
        return key in self._windows

    def clear(self) -> None:
        self._windows.clear()

    async def hit(self, key: str, limit: int, window_seconds: int, now: Optional[float] = None) -> bool:
        """Count one request for key; False once the window's limit is exceeded"""
        now = time.monotonic() if now is None else now
        async with self._lock:
            self._evict_expired(now)
            hits, expires_at = self._windows.get(key, (0, now + window_seconds))
            hits += 1
            self._windows[key] = (hits, expires_at)
        return hits <= limit

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._windows.items() if expires_at <= now]
        for key in expired:
            del self._windows[key]


local_counter = LocalWindowCounter()


def create_redis_client(config) -> redis.Redis:
    """Shared client for the app's lifetime; connections are opened lazily by its pool"""
    return redis.from_url(
        config.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=1,
        socket_timeout=1,
    )


def client_identifier(request: Request, principal: Optional[Principal] = None) -> str:
    if principal is not None:
        return f"user:{principal.user_id}"
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return f"ip:{real_ip.strip()}"
    if request.client and request.client.host:
        return f"ip:{request.client.host}"
    return "ip:unknown"


async def _consume_redis_quota(client: redis.Redis, key: str, limit: int, window_seconds: int) -> bool:
    hits = await client.incr(key)
    if hits == 1:
        await client.expire(key, window_seconds)
    return hits <= limit


def rate_limit(prefix: str, limit_setting: str) -> Callable:
    """
    Return a FastAPI dependency enforcing a per-client quota

    Args:
        prefix: Counter namespace (e.g. "billing")
        limit_setting: Name of the ApplicationConfig attribute holding the max requests per window
    """

    async def _dependency(
        request: Request,
        principal: Optional[Principal] = Depends(get_principal),
    ) -> None:
        config = request.app.state.config
        if not config.RATE_LIMIT_ENABLED:
            return

        limit = int(getattr(config, limit_setting))
        window_seconds = int(config.RATE_LIMIT_WINDOW_SECONDS)
        client_id = client_identifier(request, principal)
        key = f"photo_credits:rate:{prefix}:{client_id}"

        try:
            allowed = await _consume_redis_quota(request.app.state.redis, key, limit, window_seconds)
        except (redis.RedisError, OSError) as e:
            logger.debug(f"Redis unavailable for rate limiting, using local counter: {e}")
            allowed = await local_counter.hit(key, limit, window_seconds)

        if not allowed:
            log_warn(
                "Rate limit exceeded",
                request,
                limit_type=prefix,
                client_id=client_id,
                limit=limit,
                window_seconds=window_seconds,
            )
            raise ClientError(
                Error(
                    code="RATE_LIMITED",
                    message=f"Too many requests. Try again in {window_seconds} seconds.",
                )
            )

    return _dependency
