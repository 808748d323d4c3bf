"""Shortcode generation and allocation

Shortcodes are drawn uniformly at random from a fixed alphabet (by default
6 characters over [0-9A-Za-z], i.e. 62^6 ~ 56.8 billion codes) using the
`secrets` CSPRNG, so they can't be enumerated from one another.

Functions:
    generate_code(length, alphabet) -> str:
        Random shortcode without any uniqueness check.
    is_valid_code_format(code, length, alphabet) -> bool:
        Cheap syntactic check used before touching storage.

Classes:
    CodeAllocator:
        Generate-and-check loop guaranteeing a shortcode is free in storage.

Example:
    >>> allocator = CodeAllocator(short_url_dao=dao)
    >>> code = allocator.allocate_unique_code()
    >>> len(code)
    6
    >>> allocator.is_valid_format(code)
    True
"""

import logging
import secrets

from shortlink.constants import Defaults, LogEvent
from shortlink.dao.base import ShortURLBaseDAO
from shortlink.exceptions import BadConfigurationError, CodeGenerationError


logger = logging.getLogger(__name__)


def generate_code(length: int = Defaults.CODE_LENGTH, alphabet: str = Defaults.ALPHABET) -> str:
    """Generate a random shortcode of `length` symbols from `alphabet`."""
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def is_valid_code_format(code: object, length: int = Defaults.CODE_LENGTH, alphabet: str = Defaults.ALPHABET) -> bool:
    """Return True if `code` has exactly `length` symbols, all drawn from `alphabet`.

    Example:
        >>> is_valid_code_format('aB3xY9')
        True
        >>> is_valid_code_format('aB3xY')
        False
        >>> is_valid_code_format('aB3-Y9')
        False
    """
    return isinstance(code, str) and len(code) == length and all(char in alphabet for char in code)


class CodeAllocator:
    """Allocate shortcodes which are not yet taken in storage.

    Each attempt generates a random candidate and asks the DAO whether it
    exists. A taken candidate is a collision: it is logged as a
    CODE_COLLISION record and a fresh candidate is drawn. The allocator keeps
    no state between calls. After `max_retries` consecutive collisions the
    allocator gives up with CodeGenerationError.

    NOTE: Checking and saving are two separate calls, so another writer can
          take the candidate in between. Allocation only bounds the retries;
          the DAO's save must reject the write if the shortcode is taken.

    Attributes:
        short_url_dao (ShortURLBaseDAO):
            Storage consulted for existence checks.
        length (int):
            Shortcode length.
        alphabet (str):
            Shortcode symbols.
        max_retries (int):
            Attempts before giving up.
    """

    def __init__(
        self,
        short_url_dao: ShortURLBaseDAO,
        length: int = Defaults.CODE_LENGTH,
        alphabet: str = Defaults.ALPHABET,
        max_retries: int = Defaults.MAX_RETRIES,
    ):
        if length < 1:
            raise BadConfigurationError(f'Shortcode length must be a positive integer (given value: {length}).')
        if len(alphabet) < 2 or len(set(alphabet)) != len(alphabet):
            raise BadConfigurationError(f'Shortcode alphabet must have at least 2 unique symbols (given value: {alphabet!r}).')
        if max_retries < 1:
            raise BadConfigurationError(f'Max retries must be a positive integer (given value: {max_retries}).')

        self.short_url_dao = short_url_dao
        self.length = length
        self.alphabet = alphabet
        self.max_retries = max_retries

    def generate_code(self) -> str:
        return generate_code(self.length, self.alphabet)

    def is_valid_format(self, code: object) -> bool:
        return is_valid_code_format(code, self.length, self.alphabet)

    def allocate_unique_code(self) -> str:
        """Return a shortcode which doesn't exist in storage yet

        Raises:
            CodeGenerationError:
                If every one of the `max_retries` candidates was taken.
            DataStoreError:
                If the existence check fails.
        """
        for attempt in range(1, self.max_retries + 1):
            candidate = self.generate_code()
            if not self.short_url_dao.exists(candidate):
                return candidate

            logger.warning(
                'Shortcode collision detected.',
                extra={
                    'event': LogEvent.CODE_COLLISION,
                    'shortcode': candidate,
                    'attempt': attempt,
                    'maxRetries': self.max_retries,
                    'backend': self.short_url_dao.backend,
                },
            )

        raise CodeGenerationError(f'Failed to generate a unique shortcode after {self.max_retries} attempts.')
