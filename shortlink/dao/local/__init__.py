from shortlink.dao.local.short_url_json_dao import ShortURLJsonDAO
from shortlink.dao.local.rate_limit_memory_dao import RateLimitMemoryDAO


__all__ = [
    'ShortURLJsonDAO',
    'RateLimitMemoryDAO',
]
