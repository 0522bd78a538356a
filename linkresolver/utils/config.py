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
            "create_link": {
                "redis": { "host": ..., "port": ..., "db": ... },
                "cache": { "host": ..., "port": ..., "db": ... },
                "filter": { ... },
                "resolver": { "shortcode_length": 10, "cache_ttl": 3600 }
            },
            "resolve_link": { ... }
        }
    }

`redis` is the persistent store connection. `cache` and `filter` are
optional; they default to the store and cache connections respectively.
`resolver` holds the tunables of ResolverConfig.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig and
        return it as a Python dictionary. In SAM, load configuration
        from a local AppConfig agent.

Classes:
    ResolverConfig
        Tunables of the resolution service (shortcode length, retries,
        cache TTL, existence filter sizing).

Example:
    Typical usage inside a Lambda handler:

        >>> from linkresolver.utils.config import load_config
        >>> config = load_config('resolve_link')
        >>> print(config['redis']['host'])
        redis-15501.host.docker.internal
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass, fields
from typing import Any
from collections.abc import Callable, Mapping

import boto3

from linkresolver.utils.helpers import require_environment
from linkresolver.utils.runtime import running_locally
from linkresolver.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
    DEFAULT_SHORTCODE_LENGTH,
    DEFAULT_MAX_RETRIES,
    DEFAULT_FILTER_NAME,
    DEFAULT_FILTER_CAPACITY,
    DEFAULT_FILTER_ERROR_RATE,
    DEFAULT_CACHE_TTL,
)


logger = logging.getLogger(__name__)

# Optional per-lambda sections returned next to the active backend
OPTIONAL_SECTIONS = ('cache', 'filter', 'resolver')


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkresolver'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkresolver:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _extract_lambda_config(document: dict[str, Any], lambda_name: str) -> dict[str, Any]:
    """Pick the active backend and the optional sections for one lambda"""
    backend = document['active_backend']
    section = document['configs'][lambda_name]

    data = {backend: section[backend]}
    data.update({key: section[key] for key in OPTIONAL_SECTIONS if key in section})
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
    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise ValueError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise ValueError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise ValueError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = __validate_appconfig_url(os.getenv(APPCONFIG_AGENT_URL_ENV))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(APPCONFIG_PROFILE_NAME_ENV, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            config = json.load(r)

        data = _extract_lambda_config(config, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
        return data

    return wrapper


@_sam_load_local_appconfig
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config(lambda_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'create_link', 'resolve_link').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "create_link" or "resolve_link").

    Returns:
        dict: The active backend's config plus the optional 'cache',
              'filter' and 'resolver' sections, when present.

    Raises:
        KeyError:
            If required environment variables are missing, or the document
            has no section for `lambda_name`.
        botocore.exceptions.ClientError:
            If AppConfig calls fail.

    Example:
        >>> app_config = load_config('create_link')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    data = _extract_lambda_config(config, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
    return data


@dataclass(frozen=True)
class ResolverConfig:
    """Tunables of the resolution service.

    Attributes:
        shortcode_length (int):
            Length of generated shortcodes.
        max_retries (int):
            Attempts at generating a free shortcode before giving up.
        cache_ttl (int):
            TTL in seconds of cache entries populated on a read miss.
        filter_name (str):
            Name of the existence filter.
        filter_capacity (int):
            Expected number of shortcodes the filter is sized for.
        filter_error_rate (float):
            Target false-positive rate of the filter, in (0, 1).
    """

    shortcode_length: int = DEFAULT_SHORTCODE_LENGTH
    max_retries: int = DEFAULT_MAX_RETRIES
    cache_ttl: int = DEFAULT_CACHE_TTL
    filter_name: str = DEFAULT_FILTER_NAME
    filter_capacity: int = DEFAULT_FILTER_CAPACITY
    filter_error_rate: float = DEFAULT_FILTER_ERROR_RATE

    def __post_init__(self):
        for name in ('shortcode_length', 'max_retries', 'cache_ttl', 'filter_capacity'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f'{name} must be a positive integer (given value: {value!r}).')
        if not isinstance(self.filter_name, str) or not self.filter_name:
            raise ValueError(f'filter_name must be a non-empty string (given value: {self.filter_name!r}).')
        if not 0 < self.filter_error_rate < 1:
            raise ValueError(f'filter_error_rate must be in (0, 1) (given value: {self.filter_error_rate!r}).')

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> 'ResolverConfig':
        """Build a ResolverConfig from the 'resolver' config section, ignoring unknown keys"""
        known = {field.name for field in fields(cls)}
        return cls(**{k: v for k, v in (mapping or {}).items() if k in known})
