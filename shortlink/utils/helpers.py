"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    get_header() -> str | None
        Case-insensitive request header lookup
    client_key() -> str
        Derive the rate limiting identity of the caller
    error_response() -> dict
        Build the JSON error envelope returned by every endpoint
    rate_limit_headers() -> dict
        Build the X-RateLimit-* (and Retry-After) response headers
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn uncaught handler exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlink.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import math
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from shortlink.types import LambdaEvent, LambdaResponse
from shortlink.constants import ERROR_STATUS, ErrorCode, RateLimit
from shortlink.models import RateLimitDecision
from shortlink.exceptions import MissingEnvironmentVariableError
from shortlink.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, base: str) -> str:
    """Join a base origin and a shortcode into the public short URL

    Example:
        >>> get_short_url('abc123', 'https://sho.rt/')
        'https://sho.rt/abc123'
    """
    return f'{base.rstrip("/")}/{shortcode}'


def get_header(event: LambdaEvent, name: str) -> str | None:
    """Return the value of request header `name` (case-insensitive), or None."""
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def client_key(event: LambdaEvent) -> str:
    """Derive the caller's identity for rate limiting

    Prefers the first address of X-Forwarded-For, then X-Real-IP.

    NOTE: Without either header every caller falls back to the same loopback
          placeholder and therefore shares one rate limit bucket.

    Example:
        >>> client_key({'headers': {'X-Forwarded-For': '203.0.113.7, 10.0.0.1'}})
        '203.0.113.7'
        >>> client_key({})
        '127.0.0.1'
    """
    forwarded_for = get_header(event, 'X-Forwarded-For')
    if forwarded_for and forwarded_for.split(',')[0].strip():
        return forwarded_for.split(',')[0].strip()

    real_ip = get_header(event, 'X-Real-IP')
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return RateLimit.FALLBACK_CLIENT_KEY


def error_response(error_code: ErrorCode, message: str, headers: dict[str, str] | None = None) -> LambdaResponse:
    """Build the `{success: false, error: {code, message}}` response for `error_code`

    Example:
        >>> error_response(ErrorCode.BLOCKED_DOMAIN, 'This domain is not allowed')['statusCode']
        400
    """
    return {
        'statusCode': ERROR_STATUS[error_code],
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(
            {
                'success': False,
                'error': {
                    'code': str(error_code),
                    'message': message,
                },
            }
        ),
    }


def rate_limit_headers(decision: RateLimitDecision, now: datetime | None = None) -> dict[str, str]:
    """Build rate limit response headers from a limiter decision

    Rejected decisions also get `Retry-After` (whole seconds, at least 1).

    Example:
        >>> decision = RateLimitDecision(True, 20, 19, datetime(2025, 10, 15, 12, 1, tzinfo=UTC))
        >>> rate_limit_headers(decision)
        {'X-RateLimit-Limit': '20', 'X-RateLimit-Remaining': '19', 'X-RateLimit-Reset': '2025-10-15T12:01:00.000Z'}
    """
    reset_at = decision.reset_at.astimezone(UTC)
    headers = {
        'X-RateLimit-Limit': str(decision.limit),
        'X-RateLimit-Remaining': str(decision.remaining),
        'X-RateLimit-Reset': reset_at.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
    }
    if not decision.allowed:
        seconds = (reset_at - (now or datetime.now(UTC))).total_seconds()
        headers['Retry-After'] = str(max(math.ceil(seconds), 1))
    return headers


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 INTERNAL_ERROR when a handler raises

    When running locally the exception is re-raised instead, so the
    traceback shows up in SAM / the test runner.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context, *args, **kwargs) -> LambdaResponse:
        try:
            return handler(event, context, *args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': ErrorCode.INTERNAL_ERROR})
            return error_response(ErrorCode.INTERNAL_ERROR, 'An unexpected error occurred. Please try again.')

    return wrapper
