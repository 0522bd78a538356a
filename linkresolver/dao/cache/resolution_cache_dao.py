"""DAO for caching shortcode resolutions in Redis

This module provides a Redis-backed implementation of ResolutionCacheBaseDAO.
The cache may live on the same Redis deployment as the persistent store or on
a dedicated one (e.g. ElastiCache); keys are namespaced under 'cache:'.

Key layout (see CacheKeySchema):
    cache:<prefix>:links:<shortcode>    -> canonical target address (string)

Classes:
    ResolutionCacheRedisDAO:
        Concrete resolution cache backed by Redis.

Example:
    >>> cache = ResolutionCacheRedisDAO(prefix="linkresolver:dev")
    >>> cache.set("abc123", "https://example.com/page", ttl=3600)
    <ResolutionCacheRedisDAO>
    >>> cache.get("abc123")
    'https://example.com/page'
    >>> cache.invalidate("abc123")
    True
    >>> cache.get("abc123") is None
    True
"""

from typing import Optional

import redis
from beartype import beartype

from linkresolver.dao.base import ResolutionCacheBaseDAO
from linkresolver.dao.cache.cache_key_schema import CacheKeySchema
from linkresolver.dao.redis.mixins import RedisClientMixin
from linkresolver.dao.exceptions import DataStoreError
from linkresolver.dao.redis.helpers import handle_redis_connection_error, redis_address


class ResolutionCacheRedisDAO(RedisClientMixin, ResolutionCacheBaseDAO):
    """Redis-backed shortcode -> target address cache

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the cache datastore.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.

    All methods raise DataStoreError on connectivity issues with Redis and on
    commands the server rejects (OOM under noeviction, READONLY replica, WRONGTYPE).
    """

    def __init__(self, *args, prefix: Optional[str] = None, **kwargs):
        super().__init__(*args, prefix=prefix, **kwargs)
        self.keys = CacheKeySchema(prefix=prefix)

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> Optional[str]:
        """Return the cached target address, or None on a CACHE MISS"""
        key = self.keys.link_target_key(shortcode)
        try:
            return self.redis.get(key)
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f"Redis at {redis_address(self.redis)} rejected GET {key}: {e}") from e

    @handle_redis_connection_error
    @beartype
    def set(self, shortcode: str, target: str, ttl: Optional[int] = None, **kwargs) -> 'ResolutionCacheRedisDAO':
        """Cache a target address under `shortcode`

        Args:
            shortcode (str):
                Shortcode to cache the target address under.
            target (str):
                Canonical target address.
            ttl (Optional[int]):
                Expiry in seconds. None stores the value without expiry.

        Returns:
            ResolutionCacheRedisDAO: self (for method chaining)

        Raises:
            ValueError:
                If ttl is not a positive number of seconds.
            DataStoreError:
                If a Redis connectivity issue occurs or Redis rejects the write.
        """
        if ttl is not None and ttl <= 0:
            raise ValueError(f'Cache TTL must be a positive number of seconds (given value: {ttl}).')

        key = self.keys.link_target_key(shortcode)
        try:
            self.redis.set(key, target, ex=ttl)
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f"Redis at {redis_address(self.redis)} rejected SET {key}: {e}") from e
        return self

    @handle_redis_connection_error
    @beartype
    def invalidate(self, shortcode: str, **kwargs) -> bool:
        """Drop the cached target address. Returns True if a value was removed."""
        key = self.keys.link_target_key(shortcode)
        try:
            return self.redis.delete(key) > 0
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f"Redis at {redis_address(self.redis)} rejected DEL {key}: {e}") from e
