"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile (typically
`backend-config`) and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { "host": ..., "port": ..., "db": ... },
                "local": { "path": "data/urls.json" }
            },
            "redirect_url": { ... }
        },
        "shortener": {
            "base_url": "https://sho.rt",
            "code_length": 6,
            "max_retries": 5,
            "blocked_domains": ["localhost", "127.0.0.1", "0.0.0.0"],
            "rate_limit": { "limit": 20, "window_seconds": 60 }
        }
    }

Each Lambda loads its own backend section (e.g., `"shorten_url"`) plus the
shared `"shortener"` section:

    {
        "active_backend": "redis",
        "redis": { ... },
        "shortener": { ... }
    }

When running locally the document can instead come from a local AppConfig
agent (`APPCONFIG_AGENT_URL`) or from a YAML file `config/<APP_ENV>.yml`
under the project root:

    config/
    ├── local.yml
    └── test.yml

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the project root directory (`PROJECT_ROOT`, default: working directory).

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda.

Classes:
    ShortenerSettings
        Parsed and validated `"shortener"` section.

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlink.utils.config import load_config, ShortenerSettings
        >>> config = load_config('shorten_url')
        >>> config['active_backend']
        'redis'
        >>> ShortenerSettings.from_config(config).code_length
        6
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Callable

import boto3
import yaml

from shortlink.types import AppConfig, LambdaConfiguration
from shortlink.constants import ENV, Defaults, RateLimit
from shortlink.exceptions import BadConfigurationError
from shortlink.utils.helpers import require_environment
from shortlink.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'shortlink'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlink:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def lambda_configuration(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Extract the active backend's section for `lambda_name` from a full config document

    Raises:
        BadConfigurationError:
            If the document lacks `active_backend` or the lambda's backend section.
    """
    try:
        backend = document['active_backend']
        return {
            'active_backend': backend,
            backend: document['configs'][lambda_name][backend],
            'shortener': document.get('shortener') or {},
        }
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"Configuration has no '{lambda_name}' section for the active backend.") from e


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function.

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    # ruff: noqa: E701
    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return lambda_configuration(document, lambda_name)

    return wrapper


def _load_local_config_file(func: Callable) -> Callable:
    """Decorator: load configuration from `config/<APP_ENV>.yml` when running locally.

    Falls through to the wrapped function when not running locally or when
    the file doesn't exist.
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        path = project_root() / 'config' / f'{app_env()}.yml'
        if not running_locally() or not path.is_file():
            return func(lambda_name)

        logger.debug('Trying to load configuration from local file.', extra={'path': str(path), 'lambdaName': lambda_name})
        with path.open(encoding='utf-8') as f:
            try:
                document = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise BadConfigurationError(f'Invalid YAML in {path}') from e

        if not isinstance(document, dict):
            raise BadConfigurationError(f'Configuration file {path} must contain a mapping.')

        logger.debug('Loaded configuration from local file.', extra={'path': str(path), 'build': document.get('build')})
        return lambda_configuration(document, lambda_name)

    return wrapper


@_sam_load_local_appconfig
@_load_local_config_file
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is missing.
        BadConfigurationError:
            If the document doesn't describe the requested lambda.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return lambda_configuration(document, lambda_name)


def _require_int(name: str, value: object, minimum: int = 1) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise BadConfigurationError(f"'{name}' must be an integer >= {minimum} (given value: {value!r}).")


@dataclass(frozen=True)
class ShortenerSettings:
    """Validated `"shortener"` configuration section. Every key is optional."""

    base_url: str | None = None
    code_length: int = Defaults.CODE_LENGTH
    alphabet: str = Defaults.ALPHABET
    max_retries: int = Defaults.MAX_RETRIES
    blocked_domains: tuple[str, ...] = Defaults.BLOCKED_DOMAINS
    min_url_length: int = Defaults.MIN_URL_LENGTH
    max_url_length: int = Defaults.MAX_URL_LENGTH
    rate_limit: int = RateLimit.LIMIT
    rate_limit_window_seconds: int | float = RateLimit.WINDOW_SECONDS

    def __post_init__(self):
        if self.base_url is not None and urllib.parse.urlsplit(self.base_url).scheme not in {'http', 'https'}:
            raise BadConfigurationError(f"'base_url' must be an absolute http(s) URL (given value: {self.base_url!r}).")
        _require_int('code_length', self.code_length)
        _require_int('max_retries', self.max_retries)
        _require_int('min_url_length', self.min_url_length, minimum=0)
        _require_int('max_url_length', self.max_url_length)
        _require_int('rate_limit.limit', self.rate_limit)
        if not isinstance(self.alphabet, str) or len(set(self.alphabet)) < 2 or len(set(self.alphabet)) != len(self.alphabet):
            raise BadConfigurationError(f"'alphabet' must have at least 2 unique symbols (given value: {self.alphabet!r}).")
        if self.min_url_length > self.max_url_length:
            raise BadConfigurationError("'min_url_length' must not exceed 'max_url_length'.")
        window = self.rate_limit_window_seconds
        if isinstance(window, bool) or not isinstance(window, (int, float)) or window <= 0:
            raise BadConfigurationError(f"'rate_limit.window_seconds' must be positive (given value: {window!r}).")

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration) -> 'ShortenerSettings':
        """Build settings from the `"shortener"` section of a lambda configuration."""
        section = app_config.get('shortener') or {}
        rate_limit = section.get('rate_limit') or {}

        kwargs = {
            key: section[key]
            for key in ('base_url', 'code_length', 'alphabet', 'max_retries', 'min_url_length', 'max_url_length')
            if key in section
        }
        if 'blocked_domains' in section:
            kwargs['blocked_domains'] = tuple(section['blocked_domains'])
        if 'limit' in rate_limit:
            kwargs['rate_limit'] = rate_limit['limit']
        if 'window_seconds' in rate_limit:
            kwargs['rate_limit_window_seconds'] = rate_limit['window_seconds']

        return cls(**kwargs)
