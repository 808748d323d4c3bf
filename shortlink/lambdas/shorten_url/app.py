import json
import logging
import functools

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.constants import ErrorCode, LogEvent
from shortlink.exceptions import ConfigurationError
from shortlink.dao.exceptions import DAOError
from shortlink.dao.factory import short_url_dao_from_config, rate_limit_dao_from_config
from shortlink.services import RateLimiter, ShortenService
from shortlink.utils import (
    load_config,
    base_url,
    client_key,
    error_response,
    rate_limit_headers,
    guarantee_500_response,
    ShortenerSettings,
)


logger = logging.getLogger(__name__)

NO_CACHE = 'no-cache, no-store, must-revalidate'


@functools.cache
def _dependencies() -> tuple[ShortenService, RateLimiter]:
    """Build the service graph once per Lambda container"""
    app_config = load_config('shorten_url')
    settings = ShortenerSettings.from_config(app_config)

    short_url_dao = short_url_dao_from_config(app_config)
    rate_limit_dao = rate_limit_dao_from_config(app_config, settings)
    logger.debug('Initialized shorten_url dependencies.', extra={'backend': short_url_dao.backend})

    return ShortenService(short_url_dao, settings), RateLimiter(rate_limit_dao)


def response_200(*, code: str, short_url: str, headers: dict[str, str]) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {
            'Content-Type': 'application/json',
            'Cache-Control': NO_CACHE,
            **headers,
        },
        'body': json.dumps(
            {
                'success': True,
                'data': {
                    'shortUrl': short_url,
                    'code': code,
                },
            }
        ),
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Reject anything but POST
    - Step 2: Admit the caller through the rate limiter (fail-open)
    - Step 3: Extract the URL from the JSON request body
    - Step 4: Validate, allocate a shortcode and store the record (via ShortenService)
    - Step 5: Respond with the short URL

    HTTP responses:
        200: Successful URL shortening
            data.shortUrl: newly generated short URL
            data.code: newly generated shortcode
        400: Bad client request
            error.code: INVALID_JSON, MISSING_URL or a URL validation code
        405: Method not allowed
            error.code: METHOD_NOT_ALLOWED
        429: Too many shorten requests from this client
            error.code: RATE_LIMIT_EXCEEDED
        500: Internal server error
            error.code: CODE_GENERATION_FAILED, STORAGE_ERROR or INTERNAL_ERROR

    Every response from step 2 onward carries X-RateLimit-Limit,
    X-RateLimit-Remaining and X-RateLimit-Reset headers.

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'httpMethod': 'POST', 'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['data']['shortUrl']
        'https://sho.rt/aB3xY9'
    """
    # 1- Only POST creates short URLs
    method = (event.get('httpMethod') or 'POST').upper()
    if method != 'POST':
        logger.info('Method not allowed. Responding with 405.', extra={'method': method})
        return error_response(ErrorCode.METHOD_NOT_ALLOWED, f'{method} method not supported. Use POST to shorten URLs.', headers={'Allow': 'POST'})

    try:
        shorten_service, rate_limiter = _dependencies()
    except (ConfigurationError, DAOError):
        logger.exception('Failed to initialize shorten_url dependencies. Responding with 500.', extra={'event': LogEvent.CONFIGURATION_FAILURE})
        return error_response(ErrorCode.INTERNAL_ERROR, 'An unexpected error occurred. Please try again.')

    # 2- Admit the caller through the rate limiter
    caller = client_key(event)
    decision = rate_limiter.admit(caller)
    headers = rate_limit_headers(decision)
    if not decision.allowed:
        return error_response(ErrorCode.RATE_LIMIT_EXCEEDED, 'Too many requests. Please try again later.', headers=headers)

    # 3- Extract the URL from the request body
    try:
        request_body = json.loads(event.get('body') or '')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'clientKey': caller})
        return error_response(ErrorCode.INVALID_JSON, 'Invalid JSON in request body', headers=headers)

    raw_url = request_body.get('url') if isinstance(request_body, dict) else None
    if not raw_url or not isinstance(raw_url, str):
        logger.info("Missing 'url' in request body. Responding with 400.", extra={'clientKey': caller})
        return error_response(ErrorCode.MISSING_URL, 'URL is required', headers=headers)

    # 4- Shorten the URL
    result = shorten_service.shorten(raw_url, base_url=base_url(event))
    if not result.success:
        return error_response(result.error, result.message, headers=headers)

    # 5- Respond with the new short URL
    return response_200(code=result.code, short_url=result.short_url, headers=headers)
