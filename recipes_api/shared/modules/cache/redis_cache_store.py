"""
Redis Cache Store

Redis-backed implementation of CacheStore. Every backend failure surfaces as
StorageUnavailable so callers can tell a miss (None) apart from an outage.
"""
import logging
from typing import Optional

import redis

from recipes_api.shared.modules.cache.cache_store import CacheStore
from recipes_api.shared.modules.recipe.errors import StorageUnavailable

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStore):
    """
    A client for reading and writing cache entries in Redis.
    """

    def __init__(self, redis_client: redis.StrictRedis):
        self.redis = redis_client

    @classmethod
    def from_settings(cls, settings) -> "RedisCacheStore":
        """
        Build a store from Settings, bounding every call with the configured timeout.
        """
        client = redis.StrictRedis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            socket_timeout=settings.redis_timeout_s,
            socket_connect_timeout=settings.redis_timeout_s,
            decode_responses=True,
        )
        logger.info(f"Redis cache initialized at {settings.redis_host}:{settings.redis_port}")
        return cls(client)

    def get(self, cache_key: str) -> Optional[str]:
        try:
            return self.redis.get(cache_key)
        except redis.exceptions.RedisError as e:
            logger.error(f"Could not read '{cache_key}' from Redis: {e}")
            raise StorageUnavailable("Cache backend unavailable") from e

    def set(self, cache_key: str, value: str, ttl_seconds: Optional[int] = None):
        try:
            self.redis.set(cache_key, value, ex=ttl_seconds)
        except redis.exceptions.RedisError as e:
            logger.error(f"Could not write '{cache_key}' to Redis: {e}")
            raise StorageUnavailable("Cache backend unavailable") from e

    def delete(self, cache_key: str):
        try:
            self.redis.delete(cache_key)
        except redis.exceptions.RedisError as e:
            logger.error(f"Could not delete '{cache_key}' from Redis: {e}")
            raise StorageUnavailable("Cache backend unavailable") from e

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except redis.exceptions.RedisError:
            return False
