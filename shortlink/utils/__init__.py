from shortlink.utils.config import app_env, app_name, project_root, app_prefix, load_config, ShortenerSettings
from shortlink.utils.helpers import (
    base_url,
    get_short_url,
    get_header,
    client_key,
    error_response,
    rate_limit_headers,
    require_environment,
    guarantee_500_response,
)
from shortlink.utils.shortener import CodeAllocator, generate_code, is_valid_code_format
from shortlink.utils.validator import ValidationResult, validate_url, is_valid_url_format, normalize_url
from shortlink.utils.logging import initialize_logging


__all__ = [
    'CodeAllocator',
    'generate_code',
    'is_valid_code_format',
    'ValidationResult',
    'validate_url',
    'is_valid_url_format',
    'normalize_url',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'ShortenerSettings',
    'base_url',
    'get_short_url',
    'get_header',
    'client_key',
    'error_response',
    'rate_limit_headers',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
