"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides the distributed storage backend: every shortcode is an
independent Redis key holding the JSON-serialized UrlRecordModel.

Responsibilities:
    - Save and retrieve records from Redis;
    - Check shortcode existence for the code allocator;
    - Never overwrite an existing record (create-if-absent writes);
    - Provide defensive error handling and raise appropriate DAO exceptions.

Key layout:
    [<prefix>:]shorturl:<shortcode>  ->  '{"url": "...", "createdAt": "...", "expiresAt": "..."}'

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving UrlRecordModel in a Redis datastore.

Example:
    >>> from shortlink.models import UrlRecordModel
    >>> from shortlink.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")
    >>> dao.save('abc123', UrlRecordModel(url='https://example.com/page'))
    <ShortURLRedisDAO>

    >>> dao.get('abc123').url
    'https://example.com/page'
    >>> dao.exists('zzz999')
    False
"""

import json

from beartype import beartype

from shortlink.models import UrlRecordModel
from shortlink.dao.base import ShortURLBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_errors
from shortlink.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        save(shortcode: str, record: UrlRecordModel, **kwargs) -> ShortURLRedisDAO:
            Store a record with a single SET NX.
            Raises ShortURLAlreadyExistsError when the shortcode is taken.
            Raises DataStoreError on Redis failures.

        get(shortcode: str, **kwargs) -> UrlRecordModel | None:
            Retrieve a record with a single GET. Returns None if absent.
            Raises DataStoreError on Redis failures or undecodable records.

        exists(shortcode: str, **kwargs) -> bool:
            Check shortcode existence with a single EXISTS.
            Raises DataStoreError on Redis failures.
    """

    @handle_redis_errors
    @beartype
    def save(self, shortcode: str, record: UrlRecordModel, **kwargs) -> 'ShortURLRedisDAO':
        """Store a record under `shortcode` in Redis

        NOTE: The write is a conditional SET NX rather than EXISTS followed by SET.
              The code allocator already checked that the shortcode is free, but
              two concurrent allocators can pick the same candidate between that
              check and this write:

              (lambda 1): EXISTS shorturl:abc123  => 0
              (lambda 2): EXISTS shorturl:abc123  => 0
              (lambda 1): SET shorturl:abc123 <record 1> NX  => OK
              (lambda 2): SET shorturl:abc123 <record 2> NX  => nil

              With NX the second writer fails instead of silently replacing the
              first record, so a shortcode never maps to more than one URL.

        Args:
            shortcode (str):
                Unique shortcode identifying the record.
            record (UrlRecordModel):
                The record to be stored.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a record with the same shortcode already exists.
            DataStoreError:
                If a Redis failure occurs.
        """
        key = self.keys.short_url_key(shortcode)
        if not self.redis.set(key, json.dumps(record.to_dict()), nx=True):
            raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")
        return self

    @handle_redis_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> UrlRecordModel | None:
        """Retrieve a stored record by shortcode

        Returns:
            UrlRecordModel | None:
                The record if found, None otherwise.

        Raises:
            DataStoreError:
                If Redis fails or the stored value can't be decoded.

        Example:
            >>> dao.get('abc123')
            UrlRecordModel(url='https://example.com', created_at=datetime(...), expires_at=None)
        """
        raw = self.redis.get(self.keys.short_url_key(shortcode))
        if raw is None:
            return None

        try:
            return UrlRecordModel.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise DataStoreError(f"Short URL record with code '{shortcode}' is corrupt.") from e

    @handle_redis_errors
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether `shortcode` is already taken

        Example:
            >>> dao.exists('abc123')
            True
        """
        return self.redis.exists(self.keys.short_url_key(shortcode)) == 1
