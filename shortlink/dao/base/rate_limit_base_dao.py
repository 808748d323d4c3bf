"""Abstract base class for rate limiter backends.

A rate limiter DAO counts requests per client key over a trailing window of
`window_seconds` and admits at most `limit` of them. State for a key must not
outlive the window.

Example:
    >>> dao = RateLimitMemoryDAO(limit=20, window_seconds=60)
    >>> decision = dao.admit('203.0.113.7')
    >>> decision.allowed, decision.remaining
    (True, 19)
"""

from abc import ABC, abstractmethod

from shortlink.models import RateLimitDecision
from shortlink.exceptions import BadConfigurationError


class RateLimitBaseDAO(ABC):
    """Interface for sliding-window rate limiter backends.

    Methods:
        admit(client_key: str, **kwargs) -> RateLimitDecision:
            Record a request for `client_key` and decide whether it may proceed.
            Rejected requests are not counted against the window.
            Raises DataStoreError on connection failure.
    """

    backend: str = 'unknown'

    def __init__(self, limit: int, window_seconds: int | float):
        if limit < 1:
            raise BadConfigurationError(f'Rate limit must be a positive integer (given value: {limit}).')
        if window_seconds <= 0:
            raise BadConfigurationError(f'Rate limit window must be positive (given value: {window_seconds}).')

        self.limit = limit
        self.window_seconds = window_seconds

    @abstractmethod
    def admit(self, client_key: str, **kwargs) -> RateLimitDecision:
        """Count one request for `client_key` and return the limiter's decision.

        Args:
            client_key (str):
                Client identity (usually the caller's IP address).

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            RateLimitDecision: allowed flag with limit, remaining and reset time.

        Raises:
            DataStoreError:
                If the limiter backend is unreachable.
        """
        pass
