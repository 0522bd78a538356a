"""DAO for the shortcode existence filter backed by RedisBloom

The filter is a scalable Bloom filter (BF.RESERVE / BF.ADD / BF.EXISTS) kept
in Redis. The Redis server must load the RedisBloom module (bundled with
Redis Stack and Redis >= 8).

Key layout (see RedisKeySchema):
    <prefix>:filters:<name>     -> Bloom filter of every shortcode ever issued

Classes:
    ExistenceFilterRedisDAO:
        Concrete existence filter backed by RedisBloom.

Example:
    >>> bloom = ExistenceFilterRedisDAO(prefix="linkresolver:dev")
    >>> bloom.initialize(capacity=1_000_000, error_rate=0.01)
    True
    >>> bloom.add("abc123").might_contain("abc123")
    True
    >>> bloom.might_contain("never-issued")
    False
"""

from typing import Optional

import redis
from beartype import beartype

from linkresolver.dao.base import ExistenceFilterBaseDAO
from linkresolver.dao.exceptions import DataStoreError
from linkresolver.dao.redis.mixins import RedisClientMixin
from linkresolver.dao.redis.helpers import handle_redis_connection_error, redis_address
from linkresolver.utils.constants import DEFAULT_FILTER_NAME


class ExistenceFilterRedisDAO(RedisClientMixin, ExistenceFilterBaseDAO):
    """RedisBloom-backed probabilistic set of issued shortcodes

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        name (str):
            Name of the filter, part of its key.

    All methods raise DataStoreError on connectivity issues with Redis or
    when the server rejects a Bloom filter command (e.g. module not loaded).
    """

    def __init__(self, *args, name: Optional[str] = DEFAULT_FILTER_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.name = name

    @property
    def key(self) -> str:
        return self.keys.filter_key(self.name)

    @handle_redis_connection_error
    @beartype
    def initialize(self, capacity: int, error_rate: float, **kwargs) -> bool:
        """Reserve the filter for `capacity` elements at `error_rate`

        Reserving an already existing filter is a no-op: the existing filter
        keeps its original sizing.

        Returns:
            bool: True if the filter was created, False if it already existed.

        Raises:
            ValueError:
                If capacity is not positive or error_rate is outside (0, 1).
            DataStoreError:
                If the server rejects BF.RESERVE or Redis is unreachable.
        """
        if capacity <= 0:
            raise ValueError(f'Filter capacity must be a positive integer (given value: {capacity}).')
        if not 0 < error_rate < 1:
            raise ValueError(f'Filter error rate must be in (0, 1) (given value: {error_rate}).')

        try:
            self.redis.bf().reserve(self.key, error_rate, capacity)
        except redis.exceptions.ResponseError as e:
            if 'exists' in str(e).lower():
                return False
            raise DataStoreError(f"Can't reserve existence filter '{self.key}' at {redis_address(self.redis)}: {e}") from e
        return True

    @handle_redis_connection_error
    @beartype
    def add(self, shortcode: str, **kwargs) -> 'ExistenceFilterRedisDAO':
        """Record `shortcode` as issued. Irreversible."""
        try:
            self.redis.bf().add(self.key, shortcode)
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f"Can't add to existence filter '{self.key}': {e}") from e
        return self

    @handle_redis_connection_error
    @beartype
    def might_contain(self, shortcode: str, **kwargs) -> bool:
        """Return False only if `shortcode` was never added"""
        try:
            return bool(self.redis.bf().exists(self.key, shortcode))
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f"Can't query existence filter '{self.key}': {e}") from e
