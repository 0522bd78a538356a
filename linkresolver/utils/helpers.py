"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    expiry_from_ttl() -> datetime | None
        Compute the absolute expiry moment of a relative TTL in UTC
    seconds_until() -> int
        Compute whole seconds left until a moment in time
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler: Callable) -> Callable
        Decorator: Turn uncaught errors of a lambda handler into HTTP 500

Example:
    Typical usage inside a Lambda handler:

        >>> from linkresolver.utils.helpers import base_url
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
import math
import logging
import functools
from datetime import datetime, timedelta, UTC
from typing import Any
from collections.abc import Callable

from linkresolver.utils.runtime import running_locally
from linkresolver.utils.constants import UNKNOWN_INTERNAL_SERVER_ERROR


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


def expiry_from_ttl(ttl: int | None, now: datetime | None = None) -> datetime | None:
    """Compute the absolute expiry moment of a relative TTL.

    Args:
        ttl (int | None):
            Time-to-live in seconds. None means "never expires".
        now (datetime | None):
            Reference moment. Defaults to the current time in UTC.

    Returns:
        datetime | None: `now + ttl` in UTC, or None if ttl is None.

    Example:
        >>> expiry_from_ttl(60, now=datetime(2025, 10, 15, tzinfo=UTC))
        datetime.datetime(2025, 10, 15, 0, 1, tzinfo=datetime.timezone.utc)
    """
    if ttl is None:
        return None
    now = now or datetime.now(UTC)
    return now + timedelta(seconds=ttl)


def seconds_until(moment: datetime, now: datetime | None = None) -> int:
    """Compute whole seconds left until `moment` (rounded up, may be <= 0).

    Example:
        >>> seconds_until(datetime(2025, 10, 15, 0, 0, 30, tzinfo=UTC), now=datetime(2025, 10, 15, tzinfo=UTC))
        30
    """
    now = now or datetime.now(UTC)
    return math.ceil((moment - now).total_seconds())


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        KeyError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        KeyError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise KeyError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with HTTP 500 when a lambda handler raises.

    When running locally (SAM, tests) the original exception is re-raised
    instead, so that tracebacks are not hidden during development.

    Args:
        handler (Callable):
            Lambda handler with signature (event, context) -> dict.

    Returns:
        Callable: wrapped handler.
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled error in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
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
