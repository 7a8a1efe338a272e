"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile (typically
`backend-config`) and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { "host": ..., "port": ..., "db": ... },
                "shortcode": { "salt": "...", "length": 7 },
                "quota": { "links": 100 },
                "rate_limits": { "create": { "limit": 40, "window": 60 } },
                "dns": { "timeout": 2.0, "workers": 8 }
            },
            "redirect_url": {
                "redis": { ... },
                "shortcode": { ... },
                "rate_limits": { "resolve": { "limit": 30, "window": 60 } }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this
AppConfig document. Sections of inactive backends are dropped.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    select_lambda_config(document, lambda_name) -> dict
        Extract one lambda's section, keeping only the active backend.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig and
        return it as a Python dictionary. In SAM, load configuration
        from a local AppConfig agent.

Classes:
    ServiceSettings
        Validated, defaulted view of a lambda's configuration section.

Example:
    Typical usage inside a Lambda handler:

        >>> from safeshortener.utils.config import load_config, ServiceSettings
        >>> settings = ServiceSettings.from_config(load_config('shorten_url'))
        >>> settings.quota_limit
        100
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, field
from collections.abc import Callable, Mapping
from typing import Any

import boto3

from safeshortener.admission.rate_limiter import DEFAULT_RATE_LIMITS, RateLimitPolicy
from safeshortener.constants import ENV, DEFAULT_DNS_TIMEOUT, DEFAULT_DNS_WORKERS, DefaultQuota, ShortCode
from safeshortener.exceptions import BadConfigurationError
from safeshortener.utils.helpers import require_environment, running_locally
from safeshortener.types import AppConfigDataClient


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = frozenset({'redis', 'memory'})


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'safeshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'safeshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def select_lambda_config(document: Mapping[str, Any], lambda_name: str) -> dict:
    """Extract one lambda's section from the full AppConfig document

    Keeps the active backend's connection settings, drops the others and
    records the backend name under 'active_backend'.

    Raises:
        BadConfigurationError: if the document lacks the backend or lambda section
    """
    try:
        backend = document['active_backend']
        section = document['configs'][lambda_name]
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no configuration for '{lambda_name}'.") from e

    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f"Unsupported backend '{backend}' (expected one of {sorted(SUPPORTED_BACKENDS)}).")

    data = {key: value for key, value in section.items() if key not in SUPPORTED_BACKENDS or key == backend}
    data['active_backend'] = backend
    return data


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    # ruff: noqa: E701
    def __validate_appconfig_url(url: str) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            config = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
        return select_lambda_config(config, lambda_name)

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: The lambda's config section as a Python dictionary.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['active_backend']
        'redis'
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    data = select_lambda_config(config, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
    return data


@dataclass(frozen=True)
class ServiceSettings:
    """Settings consumed by the short link service

    Attributes:
        backend (str): active storage backend ('redis' or 'memory')
        redis (dict): Redis connection parameters (host, port, db, ...)
        shortcode_salt (str): secret salt of the short code permutation
        shortcode_length (int): minimum short code length
        quota_limit (int): maximum links per owner
        rate_limits (dict[str, RateLimitPolicy]): policy per rate limit scope
        dns_timeout (float): DNS lookup timeout in seconds
        dns_workers (int): DNS lookup threads per process
    """

    backend: str = 'redis'
    redis: dict = field(default_factory=dict)
    shortcode_salt: str = 'default_salt'
    shortcode_length: int = ShortCode.LENGTH
    quota_limit: int = DefaultQuota.LINKS_PER_OWNER
    rate_limits: dict[str, RateLimitPolicy] = field(default_factory=lambda: dict(DEFAULT_RATE_LIMITS))
    dns_timeout: float = DEFAULT_DNS_TIMEOUT
    dns_workers: int = DEFAULT_DNS_WORKERS

    @classmethod
    def from_config(cls, app_config: Mapping[str, Any]) -> 'ServiceSettings':
        """Build settings from a lambda config section, applying defaults

        Raises:
            BadConfigurationError: if a value has the wrong type or range
        """
        shortcode = app_config.get('shortcode') or {}
        quota = app_config.get('quota') or {}
        dns = app_config.get('dns') or {}

        try:
            rate_limits = dict(DEFAULT_RATE_LIMITS)
            for scope, policy in (app_config.get('rate_limits') or {}).items():
                default = rate_limits.get(scope)
                rate_limits[scope] = RateLimitPolicy(
                    limit=int(policy.get('limit', default.limit if default else 0)),
                    window=int(policy.get('window', default.window if default else 60)),
                )

            settings = cls(
                backend=app_config.get('active_backend', 'redis'),
                redis=dict(app_config.get('redis') or {}),
                shortcode_salt=str(shortcode.get('salt', 'default_salt')),
                shortcode_length=int(shortcode.get('length', ShortCode.LENGTH)),
                quota_limit=int(quota.get('links', DefaultQuota.LINKS_PER_OWNER)),
                rate_limits=rate_limits,
                dns_timeout=float(dns.get('timeout', DEFAULT_DNS_TIMEOUT)),
                dns_workers=int(dns.get('workers', DEFAULT_DNS_WORKERS)),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise BadConfigurationError(f'Invalid service configuration: {e}') from e

        if settings.backend not in SUPPORTED_BACKENDS:
            raise BadConfigurationError(f"Unsupported backend '{settings.backend}'.")
        if not settings.shortcode_salt:
            raise BadConfigurationError('Short code salt must be a non-empty string.')
        if settings.shortcode_length < 1 or settings.quota_limit < 0 or settings.dns_timeout <= 0:
            raise BadConfigurationError('Short code length, quota limit and DNS timeout must be positive.')
        if settings.dns_workers < 1:
            raise BadConfigurationError('DNS workers must be at least 1.')
        return settings
