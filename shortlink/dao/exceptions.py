"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLAlreadyExistsError:
        Raised when attempting to save a record under a shortcode that is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, corrupt data, etc.).

Example:
    >>> from shortlink.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    shortlink.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class ShortURLAlreadyExistsError(DAOError):
    """Exception raised when attempting to save a record under a shortcode that already exists."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, corrupt records, etc.
    """

    pass
