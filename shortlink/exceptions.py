from shortlink.constants import ErrorCode


class ShortLinkError(Exception):
    """Base exception for all application-specific errors."""

    error_code = ErrorCode.INTERNAL_ERROR


class ConfigurationError(ShortLinkError):
    """Base exception for all configuration errors."""


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""


class CodeGenerationError(ShortLinkError):
    """Raised when no unique shortcode could be allocated within the retry budget."""

    error_code = ErrorCode.CODE_GENERATION_FAILED
