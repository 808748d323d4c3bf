"""URL validation and normalization

Rules are applied in order and the first failing rule decides the error:

    1. empty after trimming whitespace          -> EMPTY_URL
    2. shorter than 10 / longer than 2048 chars  -> TOO_SHORT / TOO_LONG
    3. not an absolute http(s) URL with a valid
       host (no protocol-relative form, no
       trailing dot, no underscores in labels)   -> INVALID_FORMAT
    4. scheme other than http/https              -> INVALID_PROTOCOL
    5. host equal to / under a blocked domain    -> BLOCKED_DOMAIN

Parsing and canonicalization are done by pydantic's AnyHttpUrl, which follows
the WHATWG URL standard (the same parser browsers use): lowercase scheme and
host, IDNA (punycode) host labels, IPv4 hosts in dotted-decimal form (so
`0x7f.1` is checked against the block-list as `127.0.0.1`), default ports
dropped, empty path replaced by '/', and unsafe characters percent-encoded.
Canonicalization is idempotent: validating a canonical URL returns it unchanged.

Functions:
    validate_url(raw, ...) -> ValidationResult
        Full write-path validation.
    is_valid_url_format(raw, ...) -> bool
        Loose advisory check for client-side hints. Never use it to gate writes.
    normalize_url(raw) -> str
        Best-effort canonicalization; returns the trimmed input if it can't be parsed.

Example:
    >>> validate_url('  HTTPS://Example.COM:443  ').normalized_url
    'https://example.com/'
    >>> validate_url('http://localhost/x').error
    <ErrorCode.BLOCKED_DOMAIN: 'BLOCKED_DOMAIN'>
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from shortlink.constants import Defaults, ErrorCode


ALLOWED_SCHEMES = frozenset({'http', 'https'})

_HTTP_URL = TypeAdapter(AnyHttpUrl)
_FORBIDDEN_CHARS = re.compile(r'[\s<>]')
_ADVISORY_FORMAT = re.compile(r'^https?://.+', re.IGNORECASE)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_url(). Exactly one of `normalized_url` / `error` is set."""

    is_valid: bool
    normalized_url: str | None = None
    error: ErrorCode | None = None
    message: str | None = None

    @classmethod
    def ok(cls, normalized_url: str) -> 'ValidationResult':
        return cls(is_valid=True, normalized_url=normalized_url)

    @classmethod
    def fail(cls, error: ErrorCode, message: str) -> 'ValidationResult':
        return cls(is_valid=False, error=error, message=message)


def _parse(url: str) -> AnyHttpUrl | None:
    """Parse `url` as an absolute http(s) URL. Returns None if it is malformed."""
    if _FORBIDDEN_CHARS.search(url) or url.startswith('//'):
        return None

    try:
        parsed = _HTTP_URL.validate_python(url)
    except ValidationError:
        return None

    host = parsed.host or ''
    if not host or host.endswith('.'):
        return None
    if not host.startswith('['):
        for label in host.split('.'):
            if not label or '_' in label or label.startswith('-') or label.endswith('-'):
                return None
    return parsed


def _is_blocked(host: str, blocked_domains: Iterable[str]) -> bool:
    host = host.strip('[]').lower()
    for domain in blocked_domains:
        domain = domain.lower().rstrip('.')
        if host == domain or host.endswith(f'.{domain}'):
            return True
    return False


def validate_url(
    raw: str,
    *,
    blocked_domains: Iterable[str] = Defaults.BLOCKED_DOMAINS,
    min_length: int = Defaults.MIN_URL_LENGTH,
    max_length: int = Defaults.MAX_URL_LENGTH,
) -> ValidationResult:
    """Validate and normalize a candidate URL for shortening

    Args:
        raw (str):
            URL as received from the client.
        blocked_domains (Iterable[str]):
            Hosts that may not be shortened, including all their subdomains.
        min_length (int):
            Minimum length of the trimmed URL.
        max_length (int):
            Maximum length of the trimmed (and of the normalized) URL.

    Returns:
        ValidationResult:
            `normalized_url` on success, `error` and `message` on failure.
    """
    url = raw.strip()

    if not url:
        return ValidationResult.fail(ErrorCode.EMPTY_URL, 'URL cannot be empty')
    if len(url) < min_length:
        return ValidationResult.fail(ErrorCode.TOO_SHORT, f'URL must be at least {min_length} characters long')
    if len(url) > max_length:
        return ValidationResult.fail(ErrorCode.TOO_LONG, f'URL must be at most {max_length} characters long')

    parsed = _parse(url)
    if parsed is None:
        return ValidationResult.fail(ErrorCode.INVALID_FORMAT, 'Please enter a valid URL starting with http:// or https://')
    if parsed.scheme not in ALLOWED_SCHEMES:
        return ValidationResult.fail(ErrorCode.INVALID_PROTOCOL, 'Only HTTP and HTTPS URLs are allowed')
    if _is_blocked(parsed.host, blocked_domains):
        return ValidationResult.fail(ErrorCode.BLOCKED_DOMAIN, 'This domain is not allowed')

    # Percent-encoding can grow the URL past the limit
    canonical = str(parsed)
    if len(canonical) > max_length:
        return ValidationResult.fail(ErrorCode.TOO_LONG, f'URL must be at most {max_length} characters long')

    return ValidationResult.ok(canonical)


def is_valid_url_format(raw: str, min_length: int = Defaults.MIN_URL_LENGTH, max_length: int = Defaults.MAX_URL_LENGTH) -> bool:
    """Loose check for client-side hints: length bounds and an http(s):// prefix."""
    url = raw.strip()
    return min_length <= len(url) <= max_length and _ADVISORY_FORMAT.match(url) is not None


def normalize_url(raw: str) -> str:
    """Canonicalize `raw` if it parses as an http(s) URL, otherwise return it trimmed."""
    url = raw.strip()
    parsed = _parse(url)
    return url if parsed is None else str(parsed)
