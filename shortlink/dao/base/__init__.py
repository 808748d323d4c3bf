from shortlink.dao.base.short_url_base_dao import ShortURLBaseDAO, save_url, get_url
from shortlink.dao.base.rate_limit_base_dao import RateLimitBaseDAO


__all__ = [
    'ShortURLBaseDAO',
    'RateLimitBaseDAO',
    'save_url',
    'get_url',
]
