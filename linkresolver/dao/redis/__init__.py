from linkresolver.dao.redis.redis_key_schema import RedisKeySchema
from linkresolver.dao.redis.short_entry_redis_dao import ShortEntryRedisDAO
from linkresolver.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'ShortEntryRedisDAO',
    'RedisClientMixin',
]
