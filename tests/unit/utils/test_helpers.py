"""Unit tests for helper functions in helpers.py.

Test coverage includes:

1. base_url() correct extraction
   - 1.1. Ensures URLs include the stage (e.g., `/Prod`) when invoked via AWS.
   - 1.2. Ensures URLs do NOT include stage information for clean public links.
   - 1.3. Confirms a proper localhost fallback is returned when no domain is present.

2. get_short_url() retrieves short URL string representation

3. get_header() / get_cookie() request parsing
   - 3.1. Header lookup is case-insensitive.
   - 3.2. Cookies are read from the Cookie header and from HTTP API v2 `cookies`.

4. require_environment() decorator behavior
   - 4.1. Ensures decorated functions execute when all env vars are present.
   - 4.2. Ensures missing or empty env vars raise MissingEnvironmentVariableError.

5. guarantee_500_response() behavior
"""

import json

import pytest

from shortlinks.exceptions import MissingEnvironmentVariableError
from shortlinks.utils.helpers import (
    base_url,
    get_short_url,
    get_header,
    get_cookie,
    require_environment,
    guarantee_500_response,
)


# -------------------------------
# 1.1. AWS default domain handling
# -------------------------------


@pytest.mark.parametrize(
    'domain, stage, expected',
    [
        ('abc123.execute-api.us-east-1.amazonaws.com', 'Dev', 'https://abc123.execute-api.us-east-1.amazonaws.com/Dev'),
        ('abc123.execute-api.us-east-1.amazonaws.com', 'Prod', 'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'),
    ],
)
def test_base_url_with_aws_domain(domain, stage, expected):
    """Ensure base_url() appends stage for default AWS execute-api domains."""
    event = {'requestContext': {'domainName': domain, 'stage': stage}}
    assert base_url(event) == expected


# -------------------------------
# 1.2. Custom domain handling
# -------------------------------


@pytest.mark.parametrize(
    'domain, stage, expected',
    [
        ('sho.rt', 'Dev', 'https://sho.rt'),
        ('example.com', 'Prod', 'https://example.com'),
    ],
)
def test_base_url_with_custom_domain(domain, stage, expected):
    """Ensure base_url() excludes stage for custom user-defined domains."""
    event = {'requestContext': {'domainName': domain, 'stage': stage}}
    assert base_url(event) == expected


# -------------------------------
# 1.3. Local fallback behavior
# -------------------------------


@pytest.mark.parametrize(
    'event',
    [
        {},
        {'requestContext': {}},
        {'requestContext': {'domainName': ''}},
        {'requestContext': {'stage': 'Dev'}},
    ],
)
def test_base_url_local_fallback(event):
    """Ensure base_url() returns localhost URL when no domain is provided."""
    assert base_url(event) == 'http://localhost:3000'


# -------------------------------
# 2. Get short url string representation
# -------------------------------


@pytest.mark.parametrize(
    'shortcode, domain, expected',
    [
        ('aB3xY9', 'sho.rt', 'https://sho.rt/aB3xY9'),
        ('Zz0000', 'example.com', 'https://example.com/Zz0000'),
    ],
)
def test_get_short_url(shortcode, domain, expected):
    """Ensure get_short_url() returns the correct short URL string."""
    event = {'requestContext': {'domainName': domain, 'stage': 'Prod'}}
    assert get_short_url(shortcode, event) == expected


# -------------------------------
# 3.1. Header lookup
# -------------------------------


@pytest.mark.parametrize('header_name', ['X-User-ID', 'x-user-id', 'X-USER-ID'])
def test_get_header_is_case_insensitive(header_name):
    event = {'headers': {header_name: 'user-1'}}
    assert get_header(event, 'X-User-ID') == 'user-1'


@pytest.mark.parametrize('event', [{}, {'headers': None}, {'headers': {'X-User-ID': ''}}, {'headers': {'Accept': '*/*'}}])
def test_get_header_missing(event):
    assert get_header(event, 'X-User-ID') is None


# -------------------------------
# 3.2. Cookie lookup
# -------------------------------


def test_get_cookie_from_cookie_header():
    event = {'headers': {'cookie': 'theme=dark; SHORTLINK_USER=user-1'}}
    assert get_cookie(event, 'SHORTLINK_USER') == 'user-1'


def test_get_cookie_from_http_api_cookies():
    event = {'cookies': ['theme=dark', 'SHORTLINK_USER=user-2']}
    assert get_cookie(event, 'SHORTLINK_USER') == 'user-2'


@pytest.mark.parametrize(
    'event',
    [
        {},
        {'headers': {'Cookie': 'theme=dark'}},
        {'cookies': []},
    ],
)
def test_get_cookie_missing(event):
    assert get_cookie(event, 'SHORTLINK_USER') is None


# -------------------------------
# 4.1. require_environment() happy path
# -------------------------------


def test_require_environment_happy_path(monkeypatch):
    """4.1. Decorated function executes when all env vars are present."""
    monkeypatch.setenv('ENV1', 'value1')
    monkeypatch.setenv('ENV2', 'value2')

    @require_environment('ENV1', 'ENV2')
    def sample_function(x: int) -> int:
        return x + 1

    assert sample_function(1) == 2


# -------------------------------
# 4.2. require_environment() missing or empty env vars
# -------------------------------


@pytest.mark.parametrize(
    'env_setup, missing_names',
    [
        ({'ENV1': None, 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': '', 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': None, 'ENV2': None}, ["'ENV1'", "'ENV2'"]),
    ],
)
def test_require_environment_missing_or_empty(monkeypatch, env_setup, missing_names):
    """4.2. Missing or empty env vars raise a descriptive MissingEnvironmentVariableError."""
    for name, value in env_setup.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    @require_environment('ENV1', 'ENV2')
    def sample_function() -> None:
        pass

    expected_message = f'Missing required environment variables: {", ".join(missing_names)}'
    with pytest.raises(MissingEnvironmentVariableError, match=expected_message):
        sample_function()


def test_missing_environment_variable_error_is_a_key_error():
    assert issubclass(MissingEnvironmentVariableError, KeyError)


# -------------------------------
# 5. guarantee_500_response() behavior
# -------------------------------


def test_guarantee_500_response(monkeypatch):
    """5.1. Faulty lambda handler returns 500 response when not running locally."""
    monkeypatch.setattr('shortlinks.utils.helpers.running_locally', lambda: False)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    response = faulty_lambda_handler({}, None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert body['message'] == 'Internal Server Error'
    assert body['error_code'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'


def test_guarantee_500_response_reraises_when_running_locally(monkeypatch):
    """5.2. Faulty lambda handler reraises the original exception when running locally."""
    monkeypatch.setattr('shortlinks.utils.helpers.running_locally', lambda: True)

    @guarantee_500_response
    def faulty_lambda_handler(event, context):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        faulty_lambda_handler({}, None)


def test_guarantee_500_response_passes_through_responses():
    @guarantee_500_response
    def lambda_handler(event, context):
        return {'statusCode': 302}

    assert lambda_handler({}, None) == {'statusCode': 302}
