"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    get_header() -> str | None
        Case-insensitive lookup of a request header in an API Gateway event
    get_cookie() -> str | None
        Read a single cookie value from an API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected lambda handler exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlinks.utils.helpers import base_url
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
import functools
from http.cookies import SimpleCookie, CookieError
from typing import Any
from collections.abc import Callable

from shortlinks.exceptions import MissingEnvironmentVariableError
from shortlinks.utils.runtime import running_locally
from shortlinks.utils.constants import UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

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


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive header lookup

    Args:
        event (dict): API Gateway event object passed to Lambda handler
        name (str): header name, e.g. 'X-User-ID'

    Returns:
        str | None: header value, None if the header is absent or empty
    """
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted and value:
            return value
    return None


def get_cookie(event: dict[str, Any], name: str) -> str | None:
    """Read a cookie from an API Gateway event

    Supports both the REST API format (single 'Cookie' header) and the
    HTTP API v2 format (a 'cookies' list on the event).

    Args:
        event (dict): API Gateway event object passed to Lambda handler
        name (str): cookie name

    Returns:
        str | None: cookie value, None if absent or unparsable
    """
    raw_cookies = list(event.get('cookies') or [])
    header = get_header(event, 'Cookie')
    if header:
        raw_cookies.append(header)

    for raw in raw_cookies:
        jar = SimpleCookie()
        try:
            jar.load(raw)
        except CookieError:
            logger.debug('Ignoring malformed cookie header.', extra={'cookie': raw})
            continue
        if name in jar and jar[name].value:
            return jar[name].value
    return None


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


def guarantee_500_response(handler: Callable[[dict, Any], dict]) -> Callable[[dict, Any], dict]:
    """Decorator: respond with 500 Internal Server Error on unexpected exceptions

    When running locally the original exception is re-raised so that it shows
    up in the SAM console.

    Args:
        handler (Callable[[dict, Any], dict]):
            lambda handler function

    Returns:
        Callable[[dict, Any], dict]:
            wrapped handler which always returns an API Gateway response
    """

    @functools.wraps(handler)
    def wrapper(event: dict, context: Any) -> dict:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.')
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
