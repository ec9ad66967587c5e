from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

from editorial.core.config import settings
from editorial.core.errors import ErrorKind, GenerationError

logger = logging.getLogger("uvicorn.error")

_redis: Optional[Redis] = None


def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.headers.get("x-real-ip") or "unknown"


class RateLimiter:
    """Fixed-window request counter kept in Redis."""

    def __init__(self, max_requests: int, window_s: int, redis: Optional[Redis] = None):
        self.max_requests = max_requests
        self.window_s = window_s
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def hit(self, key: str) -> Optional[int]:
        """Count one request; return seconds to wait when over the limit, else None."""
        try:
            count = await self.redis.incr(key)
            if count == 1:
                await self.redis.expire(key, self.window_s)
            if count <= self.max_requests:
                return None
            ttl = await self.redis.ttl(key)
        except (RedisError, OSError) as exc:
            # fail open
            logger.warning("ratelimit:unavailable key=%s err=%s", key, exc)
            return None
        return ttl if ttl and ttl > 0 else self.window_s


_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> Optional[RateLimiter]:
    global _limiter
    if not settings.RATE_LIMIT_ENABLED:
        return None
    if _limiter is None:
        _limiter = RateLimiter(settings.RATE_LIMIT_MAX_REQUESTS, settings.RATE_LIMIT_WINDOW_S)
    return _limiter


async def enforce_rate_limit(request: Request, limiter: Optional[RateLimiter] = Depends(get_rate_limiter)) -> None:
    if limiter is None:
        return
    ip = client_ip(request)
    scope = request.path_params.get("variant") or request.url.path.rsplit("/", 1)[-1]
    retry_after = await limiter.hit(f"rl:{scope}:{ip}")
    if retry_after is not None:
        logger.warning("ratelimit:exceeded ip=%s scope=%s retry_after=%s", ip, scope, retry_after)
        raise GenerationError(ErrorKind.RATE_LIMITED, retry_after=retry_after)
