"""Unit tests for Redis DAO helpers.

This test suite verifies that the handle_redis_connection_error decorator
properly handles Redis connection failures, and that links and
notifications survive the trip through a Redis hash.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Connection error handling
       - Ensures Redis connection and timeout errors are converted into DataStoreError.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
    4. Hash (de)serialization
       - Booleans are stored as 0/1, datetimes as ISO 8601 strings.
"""

from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
import redis

from shortlinks.models import LinkModel
from shortlinks.dao.redis.helpers import handle_redis_connection_error, serialize_link, deserialize_link, deserialize_notification
from shortlinks.dao.exceptions import DataStoreError


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""

    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()

        @handle_redis_connection_error
        def ping(self):
            return 'OK'

    dao = DummyDAO()
    assert dao.ping() == 'OK'


# -------------------------------
# 2. Connection error handling
# -------------------------------


def test_decorator_transforms_redis_connection_error():
    """Ensure Redis ConnectionError is caught and re-raised as DataStoreError."""

    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()
            self.redis.connection_pool.connection_kwargs = {
                'host': 'localhost',
                'port': 6379,
                'db': 0,
            }

        @handle_redis_connection_error
        def fail(self):
            raise redis.exceptions.ConnectionError('Cannot connect')

    dao = DummyDAO()

    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0."):
        dao.fail()


def test_decorator_transforms_redis_timeout_error():
    """Ensure a Redis reply missing its socket_timeout is re-raised as DataStoreError."""

    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()
            self.redis.connection_pool.connection_kwargs = {
                'host': 'localhost',
                'port': 6379,
                'db': 0,
            }

        @handle_redis_connection_error
        def fail(self):
            raise redis.exceptions.TimeoutError('Timeout reading from socket')

    dao = DummyDAO()

    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as exc_info:
        dao.fail()
    assert isinstance(exc_info.value.__cause__, redis.exceptions.TimeoutError)


def test_decorator_does_not_touch_other_errors():
    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()

        @handle_redis_connection_error
        def fail(self):
            raise redis.exceptions.ResponseError('WRONGTYPE')

    with pytest.raises(redis.exceptions.ResponseError):
        DummyDAO().fail()


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__


# -------------------------------
# 4. Hash (de)serialization
# -------------------------------


def test_serialize_link():
    created_at = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    link = LinkModel(
        user_id='user-1',
        code='aB3xY9',
        original_url='https://example.com',
        max_clicks=5,
        created_at=created_at,
        expires_at=created_at + timedelta(days=1),
        clicks=2,
    )

    assert serialize_link(link, 7) == {
        'id': 7,
        'user_id': 'user-1',
        'code': 'aB3xY9',
        'original_url': 'https://example.com',
        'max_clicks': 5,
        'clicks': 2,
        'created_at': '2025-10-15T12:00:00+00:00',
        'expires_at': '2025-10-16T12:00:00+00:00',
        'active': 1,
    }


@pytest.mark.parametrize('active, expected', [('1', True), ('0', False)])
def test_deserialize_link(active, expected):
    link = deserialize_link(
        {
            'id': '7',
            'user_id': 'user-1',
            'code': 'aB3xY9',
            'original_url': 'https://example.com',
            'max_clicks': '5',
            'clicks': '2',
            'created_at': '2025-10-15T12:00:00+00:00',
            'expires_at': '2025-10-16T12:00:00+00:00',
            'active': active,
        }
    )

    assert link.id == 7
    assert link.max_clicks == 5
    assert link.clicks == 2
    assert link.active is expected
    assert link.expires_at == datetime(2025, 10, 16, 12, 0, tzinfo=UTC)


def test_deserialize_notification():
    notification = deserialize_notification(
        {'id': '3', 'user_id': 'user-1', 'message': 'Link expired: aB3xY9', 'created_at': '2025-10-15T12:00:00+00:00'}
    )
    assert notification.id == 3
    assert notification.message == 'Link expired: aB3xY9'
    assert notification.created_at == datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
