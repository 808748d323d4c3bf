from .rate_limiter import RateLimiter
from .shortener_service import ShortenResult, ShortenService, RedirectService


__all__ = ['RateLimiter', 'ShortenResult', 'ShortenService', 'RedirectService']
