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
        "lifecycle": {
            "link_ttl_seconds": 86400,
            "cleanup_interval_seconds": 60,
            "code_scope": "user"
        },
        "configs": {
            "shorten_url": {
                "redis": { ... }
            },
            "redirect_url": {
                "redis": { ... }
            },
            "cleanup_links": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own backend section (e.g., `"shorten_url"`) plus the
shared `"lifecycle"` section from this AppConfig document.

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
    LifecycleConfig
        Validated link lifecycle settings (TTL, cleanup interval, code scope).

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlinks.utils.config import load_config, LifecycleConfig
        >>> config = load_config('shorten_url')
        >>> print(config['redis']['host'])
        redis-15501.host.docker.internal
        >>> LifecycleConfig.from_dict(config['lifecycle']).link_ttl_seconds
        86400
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass
from typing import Any
from collections.abc import Callable

import boto3

from shortlinks.exceptions import BadConfigurationError
from shortlinks.types import AppConfigDataClient
from shortlinks.utils.helpers import require_environment
from shortlinks.utils.runtime import running_locally
from shortlinks.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
    DEFAULT_LINK_TTL_SECONDS,
    DEFAULT_CLEANUP_INTERVAL_SECONDS,
    DEFAULT_CODE_SCOPE,
    CODE_SCOPE_USER,
    CODE_SCOPE_GLOBAL,
)


logger = logging.getLogger(__name__)


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
        >>> os.environ['APP_NAME'] = 'shortlinks'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlinks:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class LifecycleConfig:
    """Link lifecycle settings shared by every lambda.

    Attributes:
        link_ttl_seconds (int):
            Lifetime of a new link; expires_at = created_at + TTL.
        cleanup_interval_seconds (float):
            Delay between two cleanup sweeps.
        code_scope (str):
            'user' checks shortcode uniqueness within the creating user's
            links only, 'global' checks it across all links.
    """

    link_ttl_seconds: int = DEFAULT_LINK_TTL_SECONDS
    cleanup_interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS
    code_scope: str = DEFAULT_CODE_SCOPE

    def __post_init__(self):
        if not isinstance(self.link_ttl_seconds, int) or self.link_ttl_seconds <= 0:
            raise BadConfigurationError(f'link_ttl_seconds must be a positive integer (given value: {self.link_ttl_seconds!r}).')
        if not isinstance(self.cleanup_interval_seconds, (int, float)) or self.cleanup_interval_seconds <= 0:
            raise BadConfigurationError(f'cleanup_interval_seconds must be a positive number (given value: {self.cleanup_interval_seconds!r}).')
        if self.code_scope not in {CODE_SCOPE_USER, CODE_SCOPE_GLOBAL}:
            raise BadConfigurationError(f"code_scope must be '{CODE_SCOPE_USER}' or '{CODE_SCOPE_GLOBAL}' (given value: {self.code_scope!r}).")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> 'LifecycleConfig':
        """Build settings from the 'lifecycle' section, defaulting missing keys"""
        data = data or {}
        return cls(
            link_ttl_seconds=data.get('link_ttl_seconds', DEFAULT_LINK_TTL_SECONDS),
            cleanup_interval_seconds=data.get('cleanup_interval_seconds', DEFAULT_CLEANUP_INTERVAL_SECONDS),
            code_scope=data.get('code_scope', DEFAULT_CODE_SCOPE),
        )


def _extract_lambda_config(document: dict[str, Any], lambda_name: str) -> dict[str, Any]:
    backend = document['active_backend']
    return {
        backend: document['configs'][lambda_name][backend],
        'lifecycle': document.get('lifecycle', {}),
    }


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

    Fetches the AppConfig JSON once and returns the backend section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url')
    together with the shared lifecycle settings.

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "cleanup_links").

    Returns:
        dict: {<active backend>: {...}, 'lifecycle': {...}}

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

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
