from safeshortener.dao.redis.redis_key_schema import RedisKeySchema
from safeshortener.dao.redis.mixins import RedisClientMixin
from safeshortener.dao.redis.short_link_redis_dao import ShortLinkRedisDAO
from safeshortener.dao.redis.counter_redis_dao import CounterRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortLinkRedisDAO',
    'CounterRedisDAO',
]
