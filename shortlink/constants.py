import string
from enum import StrEnum


class Defaults:
    """Default values for the shortener configuration surface."""

    CODE_LENGTH = 6
    # 10 digits + 26 uppercase + 26 lowercase letters
    ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
    MAX_RETRIES = 5  # Code generation attempts before giving up
    MIN_URL_LENGTH = 10
    MAX_URL_LENGTH = 2048
    BLOCKED_DOMAINS = ('localhost', '127.0.0.1', '0.0.0.0')  # noqa: S104
    LOCAL_DATA_PATH = 'data/urls.json'


class RateLimit:
    """Rate limiting defaults for the creation endpoint."""

    LIMIT = 20  # Requests per window per client
    WINDOW_SECONDS = 60
    FALLBACK_CLIENT_KEY = '127.0.0.1'  # Used when no forwarding header is present


class Backend(StrEnum):
    """Storage/limiter backends selectable via `active_backend`."""

    REDIS = 'redis'
    LOCAL = 'local'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


class ErrorCode(StrEnum):
    """Stable error kinds returned to API clients."""

    # Validation (400)
    EMPTY_URL = 'EMPTY_URL'
    TOO_SHORT = 'TOO_SHORT'
    TOO_LONG = 'TOO_LONG'
    INVALID_FORMAT = 'INVALID_FORMAT'
    INVALID_PROTOCOL = 'INVALID_PROTOCOL'
    BLOCKED_DOMAIN = 'BLOCKED_DOMAIN'
    # Request shape (400/404/405)
    INVALID_JSON = 'INVALID_JSON'
    MISSING_URL = 'MISSING_URL'
    NOT_FOUND = 'NOT_FOUND'
    METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
    # Throttling (429)
    RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED'
    # Server side (500)
    CODE_GENERATION_FAILED = 'CODE_GENERATION_FAILED'
    STORAGE_ERROR = 'STORAGE_ERROR'
    INTERNAL_ERROR = 'INTERNAL_ERROR'


class LogEvent(StrEnum):
    """Values of the `event` field attached to structured log records."""

    CODE_COLLISION = 'CODE_COLLISION'
    CODE_GENERATION_FAILED = 'CODE_GENERATION_FAILED'
    STORAGE_WRITE_FAILURE = 'STORAGE_WRITE_FAILURE'
    STORAGE_READ_FAILURE = 'STORAGE_READ_FAILURE'
    VALIDATION_FAILED = 'VALIDATION_FAILED'
    SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
    RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED'
    RATE_LIMITER_FAILURE = 'RATE_LIMITER_FAILURE'
    REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
    SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
    CONFIGURATION_FAILURE = 'CONFIGURATION_FAILURE'


# fmt: off
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.EMPTY_URL:              400,
    ErrorCode.TOO_SHORT:              400,
    ErrorCode.TOO_LONG:               400,
    ErrorCode.INVALID_FORMAT:         400,
    ErrorCode.INVALID_PROTOCOL:       400,
    ErrorCode.BLOCKED_DOMAIN:         400,
    ErrorCode.INVALID_JSON:           400,
    ErrorCode.MISSING_URL:            400,
    ErrorCode.NOT_FOUND:              404,
    ErrorCode.METHOD_NOT_ALLOWED:     405,
    ErrorCode.RATE_LIMIT_EXCEEDED:    429,
    ErrorCode.CODE_GENERATION_FAILED: 500,
    ErrorCode.STORAGE_ERROR:          500,
    ErrorCode.INTERNAL_ERROR:         500,
}
# fmt: on
