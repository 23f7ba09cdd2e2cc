"""
Redis cache provider for sharing permissions across processes.
"""

from typing import Optional

import redis

from shared.logging import get_logger


class RedisCacheProvider:
    """Synchronous Redis-backed cache provider.

    Values are opaque serialized permissions. Redis errors are not masked;
    they propagate to the engine's caller.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        *,
        redis_url: Optional[str] = None,
        ttl_seconds: Optional[int] = None
    ):
        if client is None and redis_url is None:
            raise ValueError("Either a Redis client or a redis_url is required")

        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = get_logger("acl.cache.redis")
        self.redis = client if client is not None else redis.Redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30
        )

    def get(self, key: str) -> Optional[str]:
        value = self.redis.get(key)
        if value is None:
            self.logger.debug("Cache miss", cache_key=key)
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        if self.ttl_seconds:
            self.redis.setex(key, self.ttl_seconds, value)
        else:
            self.redis.set(key, value)
        self.logger.debug("Cached permission", cache_key=key, ttl=self.ttl_seconds)

    def delete(self, key: str) -> None:
        self.redis.delete(key)

    def ping(self) -> bool:
        """Check Redis health."""
        try:
            return bool(self.redis.ping())
        except redis.RedisError as e:
            self.logger.warning("Redis health check failed", error=str(e))
            return False

    def close(self) -> None:
        self.redis.close()
        self.logger.info("Redis cache provider closed")
