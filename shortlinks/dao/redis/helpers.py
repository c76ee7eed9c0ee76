import functools
from datetime import datetime
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from shortlinks.models import LinkModel, NotificationModel
from shortlinks.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])

# Redis is unreachable or did not answer within socket_timeout
REDIS_UNAVAILABLE_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def handle_redis_connection_error(method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError
            or redis.exceptions.TimeoutError (socket_timeout elapsed).

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_count(self):
        ...     return self.redis.get('count')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except REDIS_UNAVAILABLE_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_address(self.redis)}.") from e

    return wrapper


def redis_address(client: redis.Redis) -> str:
    """Render a client's target as host:port/db, for error messages"""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def serialize_link(link: LinkModel, link_id: int) -> dict[str, str | int]:
    """Flatten a LinkModel into a Redis hash mapping"""
    return {
        'id': link_id,
        'user_id': link.user_id,
        'code': link.code,
        'original_url': link.original_url,
        'max_clicks': link.max_clicks,
        'clicks': link.clicks,
        'created_at': link.created_at.isoformat(),
        'expires_at': link.expires_at.isoformat(),
        'active': int(link.active),
    }


def deserialize_link(data: dict[str, str]) -> LinkModel:
    """Rebuild a LinkModel from a Redis hash (decoded responses)"""
    return LinkModel(
        id=int(data['id']),
        user_id=data['user_id'],
        code=data['code'],
        original_url=data['original_url'],
        max_clicks=int(data['max_clicks']),
        clicks=int(data['clicks']),
        created_at=datetime.fromisoformat(data['created_at']),
        expires_at=datetime.fromisoformat(data['expires_at']),
        active=data['active'] == '1',
    )


def deserialize_notification(data: dict[str, str]) -> NotificationModel:
    """Rebuild a NotificationModel from a Redis hash (decoded responses)"""
    return NotificationModel(
        id=int(data['id']),
        user_id=data['user_id'],
        message=data['message'],
        created_at=datetime.fromisoformat(data['created_at']),
    )
