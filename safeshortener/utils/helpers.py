"""Helper utilities for AWS lambda functions.

Functions:
    base_url(event) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(shortcode, event) -> str
        Get string representation of short URL for a given shortcode
    owner_id(event) -> str | None
        Extract the authenticated Cognito user id from API Gateway event
    client_ip(event) -> str | None
        Extract the caller's source IP from API Gateway event
    running_locally() -> bool
        True when the lambda runs under SAM local or APP_ENV=local
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unhandled handler exceptions into HTTP 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from safeshortener.utils.helpers import base_url
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
import logging
import functools
from typing import Any
from collections.abc import Callable

from safeshortener.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from safeshortener.exceptions import MissingEnvironmentVariableError
from safeshortener.utils.responses import response_500


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
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


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short url string representation
    """
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def owner_id(event: dict[str, Any]) -> str | None:
    """Return the Cognito user id ('sub' claim) of the caller, None if unauthenticated"""
    claims = (event.get('requestContext') or {}).get('authorizer', {}).get('claims', {})
    return claims.get('sub') or None


def client_ip(event: dict[str, Any]) -> str | None:
    """Return the caller's source IP as seen by API Gateway, None if unknown"""
    identity = (event.get('requestContext') or {}).get('identity', {})
    return identity.get('sourceIp') or None


def running_locally() -> bool:
    """True under `sam local invoke` or when APP_ENV is 'local'"""
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY'
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


def guarantee_500_response(handler: Callable[..., dict]) -> Callable[..., dict]:
    """Decorator: respond with HTTP 500 instead of crashing the Lambda

    Any exception escaping the handler is logged with its traceback and
    turned into a generic 500 response. No internal details reach the client.
    When running locally the exception is re-raised for debugging.
    """

    @functools.wraps(handler)
    def wrapper(event: dict, context: Any) -> dict:
        try:
            return handler(event, context)
        except Exception:
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            if running_locally():
                raise
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
