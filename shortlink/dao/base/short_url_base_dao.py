"""Abstract base class for short URL data access objects (DAOs).

This class establishes the storage capability every backend provides,
regardless of the underlying storage mechanism (Redis, a local JSON file, ...).

Responsibilities:
    - Provide an interface for saving and retrieving UrlRecordModel objects by shortcode.
    - Provide a cheap existence check used by the code allocator.
    - Standardize error handling across multiple data store implementations.

Records are create-only: there is no update or delete operation.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlink.models import UrlRecordModel
        >>> from shortlink.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)
        >>> dao.save('a1B2c3', UrlRecordModel(url='https://example.com/blog/article-123'))

        >>> dao.exists('a1B2c3')
        True
        >>> dao.get('a1B2c3').url
        'https://example.com/blog/article-123'
        >>> dao.get('zzzzzz') is None
        True
"""

from abc import ABC, abstractmethod

from shortlink.models import UrlRecordModel


class ShortURLBaseDAO(ABC):
    """Interface for short URL data access objects (DAOs).

    Methods:
        save(shortcode: str, record: UrlRecordModel, **kwargs) -> ShortURLBaseDAO:
            Persist a new record under the given shortcode.
            Raises ShortURLAlreadyExistsError if the shortcode is taken.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> UrlRecordModel | None:
            Retrieve a record by shortcode. Returns None if absent.
            Raises DataStoreError on connection or read failure.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether a shortcode is already taken.
            Raises DataStoreError on connection or read failure.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLRedisDAO or
        ShortURLJsonDAO) must extend this class and implement all
        abstract methods.
    """

    backend: str = 'unknown'

    @abstractmethod
    def save(self, shortcode: str, record: UrlRecordModel, **kwargs) -> 'ShortURLBaseDAO':
        """Persist a new record under the given shortcode.

        Args:
            shortcode (str):
                Unique shortcode identifying the record.

            record (UrlRecordModel):
                The record to be stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a record with the same shortcode already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> UrlRecordModel | None:
        """Retrieve a record from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the record to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecordModel | None: The record if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether a record exists for the given shortcode.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass


def save_url(dao: ShortURLBaseDAO, shortcode: str, url: str) -> UrlRecordModel:
    """Create and persist a record for `url` stamped with the current time."""
    record = UrlRecordModel(url=url)
    dao.save(shortcode, record)
    return record


def get_url(dao: ShortURLBaseDAO, shortcode: str) -> str | None:
    """Return only the target URL stored under `shortcode`, or None."""
    record = dao.get(shortcode)
    return None if record is None else record.url
