"""Shorten and redirect services

ShortenService runs the creation pipeline:

    validate URL -> allocate unique shortcode -> save record -> compose short URL

and reports the outcome as a ShortenResult. Every failure is folded into one
of the stable error codes; no exception escapes `shorten()`.

RedirectService resolves a shortcode back to its target URL. Malformed codes,
missing records and storage failures all resolve to None ("not found") so
callers can't probe the backend's health through the redirect endpoint.

Example:
    >>> service = ShortenService(short_url_dao=dao, settings=ShortenerSettings(base_url='https://sho.rt'))
    >>> result = service.shorten('https://example.com/a')
    >>> result.short_url
    'https://sho.rt/aB3xY9'

    >>> RedirectService(short_url_dao=dao).resolve('aB3xY9')
    'https://example.com/a'
"""

import logging
from dataclasses import dataclass

from shortlink.constants import ErrorCode, LogEvent
from shortlink.exceptions import CodeGenerationError, ConfigurationError
from shortlink.dao.base import ShortURLBaseDAO, save_url
from shortlink.dao.exceptions import DAOError, ShortURLAlreadyExistsError
from shortlink.utils.config import ShortenerSettings
from shortlink.utils.helpers import get_short_url
from shortlink.utils.shortener import CodeAllocator, is_valid_code_format
from shortlink.utils.validator import validate_url


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of ShortenService.shorten()

    On success `code` and `short_url` are set, on failure `error` and `message`.
    """

    success: bool
    code: str | None = None
    short_url: str | None = None
    error: ErrorCode | None = None
    message: str | None = None

    @classmethod
    def ok(cls, code: str, short_url: str) -> 'ShortenResult':
        return cls(success=True, code=code, short_url=short_url)

    @classmethod
    def fail(cls, error: ErrorCode, message: str) -> 'ShortenResult':
        return cls(success=False, error=error, message=message)


class ShortenService:
    """Create short URLs

    Attributes:
        short_url_dao (ShortURLBaseDAO):
            Storage backend chosen at startup.
        settings (ShortenerSettings):
            Validation bounds, block-list, shortcode shape and base URL.
        allocator (CodeAllocator):
            Shortcode allocator bound to the same storage backend.
    """

    def __init__(self, short_url_dao: ShortURLBaseDAO, settings: ShortenerSettings | None = None):
        self.short_url_dao = short_url_dao
        self.settings = settings or ShortenerSettings()
        self.allocator = CodeAllocator(
            short_url_dao,
            length=self.settings.code_length,
            alphabet=self.settings.alphabet,
            max_retries=self.settings.max_retries,
        )

    def shorten(self, raw_url: str, base_url: str | None = None) -> ShortenResult:
        """Shorten `raw_url`

        Args:
            raw_url (str):
                URL as received from the client.
            base_url (str | None):
                Public origin used when `settings.base_url` is not configured.

        Returns:
            ShortenResult: shortcode and short URL, or the error code and message.
        """
        try:
            return self._shorten(raw_url, base_url)
        except Exception:
            logger.exception('Unexpected error while shortening URL.', extra={'backend': self.short_url_dao.backend})
            return ShortenResult.fail(ErrorCode.INTERNAL_ERROR, 'An unexpected error occurred. Please try again.')

    def _shorten(self, raw_url: str, base_url: str | None) -> ShortenResult:
        # 1- Validate and normalize the URL
        validation = validate_url(
            raw_url,
            blocked_domains=self.settings.blocked_domains,
            min_length=self.settings.min_url_length,
            max_length=self.settings.max_url_length,
        )
        if not validation.is_valid:
            logger.info('URL rejected by validation.', extra={'event': LogEvent.VALIDATION_FAILED, 'reason': validation.error})
            return ShortenResult.fail(validation.error, validation.message)

        origin = self.settings.base_url or base_url
        if origin is None:
            raise ConfigurationError('No base URL configured for composing short URLs.')

        # 2- Allocate a shortcode which isn't taken yet
        try:
            shortcode = self.allocator.allocate_unique_code()
        except CodeGenerationError:
            logger.error(
                'Shortcode allocation exhausted its retries.',
                extra={'event': LogEvent.CODE_GENERATION_FAILED, 'maxRetries': self.allocator.max_retries, 'backend': self.short_url_dao.backend},
            )
            return ShortenResult.fail(ErrorCode.CODE_GENERATION_FAILED, 'Unable to generate short code. Please try again.')
        except DAOError:
            logger.exception(
                'Storage failed during shortcode allocation.',
                extra={'event': LogEvent.STORAGE_READ_FAILURE, 'backend': self.short_url_dao.backend},
            )
            return ShortenResult.fail(ErrorCode.STORAGE_ERROR, 'Failed to save URL. Please try again.')

        # 3- Persist the record (never retried)
        try:
            save_url(self.short_url_dao, shortcode, validation.normalized_url)
        except ShortURLAlreadyExistsError:
            # Another writer took the shortcode between the existence check and the save
            logger.warning(
                'Shortcode taken by a concurrent writer.',
                extra={'event': LogEvent.CODE_COLLISION, 'shortcode': shortcode, 'backend': self.short_url_dao.backend},
            )
            return ShortenResult.fail(ErrorCode.CODE_GENERATION_FAILED, 'Unable to generate short code. Please try again.')
        except DAOError:
            logger.exception(
                'Failed to save short URL record.',
                extra={'event': LogEvent.STORAGE_WRITE_FAILURE, 'shortcode': shortcode, 'backend': self.short_url_dao.backend},
            )
            return ShortenResult.fail(ErrorCode.STORAGE_ERROR, 'Failed to save URL. Please try again.')

        # 4- Compose the public short URL
        short_url = get_short_url(shortcode, origin)
        logger.info(
            'Shortened URL.',
            extra={'event': LogEvent.SHORTEN_SUCCESS, 'shortcode': shortcode, 'backend': self.short_url_dao.backend},
        )
        return ShortenResult.ok(code=shortcode, short_url=short_url)


class RedirectService:
    """Resolve shortcodes to target URLs (read-only, no rate limiting)"""

    def __init__(self, short_url_dao: ShortURLBaseDAO, settings: ShortenerSettings | None = None):
        self.short_url_dao = short_url_dao
        self.settings = settings or ShortenerSettings()

    def is_valid_format(self, shortcode: object) -> bool:
        return is_valid_code_format(shortcode, self.settings.code_length, self.settings.alphabet)

    def resolve(self, shortcode: str) -> str | None:
        """Return the target URL for `shortcode`, or None if it can't be resolved."""
        if not self.is_valid_format(shortcode):
            logger.debug('Malformed shortcode.', extra={'shortcode': shortcode})
            return None

        try:
            record = self.short_url_dao.get(shortcode)
        except DAOError:
            logger.exception(
                'Failed to read short URL record. Treating as not found.',
                extra={'event': LogEvent.STORAGE_READ_FAILURE, 'shortcode': shortcode, 'backend': self.short_url_dao.backend},
            )
            return None

        if record is None:
            logger.info('Short URL record not found.', extra={'event': LogEvent.SHORT_URL_NOT_FOUND, 'shortcode': shortcode})
            return None
        return record.url
