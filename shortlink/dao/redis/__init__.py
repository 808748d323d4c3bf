from shortlink.dao.redis.redis_key_schema import RedisKeySchema
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from shortlink.dao.redis.rate_limit_redis_dao import RateLimitRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
    'RateLimitRedisDAO',
]
