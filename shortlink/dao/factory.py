"""DAO factory: pick the storage and rate limiter backends from configuration

The backend is chosen once, from `active_backend`, when a Lambda container
builds its dependencies. Nothing downstream ever branches on the backend:
services only see ShortURLBaseDAO / RateLimitBaseDAO.

Backends:
    redis: ShortURLRedisDAO + RateLimitRedisDAO
    local: ShortURLJsonDAO + RateLimitMemoryDAO

Example:
    >>> app_config = load_config('shorten_url')
    >>> settings = ShortenerSettings.from_config(app_config)
    >>> short_url_dao = short_url_dao_from_config(app_config)
    >>> rate_limit_dao = rate_limit_dao_from_config(app_config, settings)
"""

import logging

from shortlink.types import LambdaConfiguration
from shortlink.constants import Backend, Defaults
from shortlink.exceptions import BadConfigurationError
from shortlink.dao.base import ShortURLBaseDAO, RateLimitBaseDAO
from shortlink.utils.config import ShortenerSettings, app_prefix


logger = logging.getLogger(__name__)


def _active_backend(app_config: LambdaConfiguration) -> tuple[Backend, dict]:
    name = app_config.get('active_backend')
    try:
        backend = Backend(name)
    except ValueError as e:
        raise BadConfigurationError(f'Unknown storage backend: {name!r}') from e
    return backend, app_config.get(backend) or {}


def _redis_kwargs(backend_config: dict) -> dict:
    return {f'redis_{k}': v for k, v in backend_config.items()}


def short_url_dao_from_config(app_config: LambdaConfiguration) -> ShortURLBaseDAO:
    """Build the short URL DAO for the configured backend

    Raises:
        BadConfigurationError:
            If `active_backend` is not a known backend.
        DataStoreError:
            If the Redis backend is unreachable.
    """
    backend, backend_config = _active_backend(app_config)
    logger.debug('Selected storage backend.', extra={'backend': backend})

    if backend is Backend.REDIS:
        # Imported lazily: the local backend must work without a Redis server
        from shortlink.dao.redis import ShortURLRedisDAO

        return ShortURLRedisDAO(**_redis_kwargs(backend_config), prefix=app_prefix())

    from shortlink.dao.local import ShortURLJsonDAO

    return ShortURLJsonDAO(path=backend_config.get('path', Defaults.LOCAL_DATA_PATH))


def rate_limit_dao_from_config(app_config: LambdaConfiguration, settings: ShortenerSettings) -> RateLimitBaseDAO:
    """Build the rate limiter DAO for the configured backend"""
    backend, backend_config = _active_backend(app_config)
    logger.debug('Selected rate limiter backend.', extra={'backend': backend})

    if backend is Backend.REDIS:
        from shortlink.dao.redis import RateLimitRedisDAO

        return RateLimitRedisDAO(
            **_redis_kwargs(backend_config),
            prefix=app_prefix(),
            limit=settings.rate_limit,
            window_seconds=settings.rate_limit_window_seconds,
        )

    from shortlink.dao.local import RateLimitMemoryDAO

    return RateLimitMemoryDAO(limit=settings.rate_limit, window_seconds=settings.rate_limit_window_seconds)
