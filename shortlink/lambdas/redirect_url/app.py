import logging
import functools

from shortlink.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlink.constants import ErrorCode, LogEvent
from shortlink.exceptions import ConfigurationError
from shortlink.dao.exceptions import DAOError
from shortlink.dao.factory import short_url_dao_from_config
from shortlink.services import RedirectService
from shortlink.utils import load_config, error_response, guarantee_500_response, ShortenerSettings


logger = logging.getLogger(__name__)

NO_CACHE = 'no-cache, no-store, must-revalidate'


@functools.cache
def _dependencies() -> RedirectService:
    """Build the redirect service once per Lambda container"""
    app_config = load_config('redirect_url')
    settings = ShortenerSettings.from_config(app_config)
    return RedirectService(short_url_dao_from_config(app_config), settings)


def response_404() -> LambdaResponse:
    return error_response(ErrorCode.NOT_FOUND, 'Short URL not found', headers={'Cache-Control': NO_CACHE})


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {
            'Location': location,
            'Cache-Control': NO_CACHE,
        },
        'body': '',
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the shortcode to its target URL
    - Step 3: Redirect client to target URL

    Redirects are never rate limited.

    HTTP responses:
        301: Successful redirect
            headers:
                Location: target URL destination
        404: Not found
            error.code: NOT_FOUND (missing, malformed or unknown shortcode,
                        or the storage backend failed)
        500: Internal server error
            error.code: INTERNAL_ERROR

    Example:
        >>> event = {'pathParameters': {'code': 'aB3xY9'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    try:
        redirect_service = _dependencies()
    except (ConfigurationError, DAOError):
        logger.exception('Failed to initialize redirect_url dependencies. Responding with 500.', extra={'event': LogEvent.CONFIGURATION_FAILURE})
        return error_response(ErrorCode.INTERNAL_ERROR, 'An unexpected error occurred. Please try again.')

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('code')
    if shortcode is None:
        logger.info("Missing 'code' in path. Responding with 404.")
        return response_404()

    # 2- Resolve the shortcode
    target_url = redirect_service.resolve(shortcode)
    if target_url is None:
        return response_404()

    # 3- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 301.',
        extra={'shortcode': shortcode, 'event': LogEvent.REDIRECT_SUCCESS},
    )
    return response_301(location=target_url)
