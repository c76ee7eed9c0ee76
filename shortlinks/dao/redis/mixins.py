"""Shared Redis plumbing for LinkRedisDAO and NotificationRedisDAO.

Both DAOs of a lambda invocation talk to the same Redis database through one
client (see dao.factory.build_daos): the link DAO builds the client from the
AppConfig 'redis' section, the notification DAO reuses it.

Responsibilities:
    - Build a client from AppConfig parameters, or adopt an existing one
    - PING Redis once at construction so a misconfigured lambda fails fast

Classes:
    - RedisClientMixin: client setup, key schema and healthcheck.

Example:
    >>> link_dao = LinkRedisDAO(redis_host='redis.internal', redis_password='***', prefix='shortlinks:prod')
    >>> notification_dao = NotificationRedisDAO(redis_client=link_dao.redis, prefix='shortlinks:prod')
    >>> notification_dao._healthcheck(raise_error=False)
    True
"""

from typing import Optional

import redis

from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.dao.redis.helpers import REDIS_UNAVAILABLE_ERRORS, redis_address


class RedisClientMixin:
    """Redis client and key schema for the link and notification DAOs

    Attributes:
        redis (redis.Redis):
            Client shared with any DAO built from it. Responses are decoded
            to str; the DAOs and their Lua scripts compare against str values.

        keys (RedisKeySchema):
            Namespaced key names (links, code/user/expiry indexes, inboxes).
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = 5.0,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Build or adopt a Redis client, then PING it

        The redis_* arguments mirror the keys of the AppConfig 'redis'
        section (build_daos prefixes them with 'redis_'). They are ignored
        when redis_client is given.

        Args:
            redis_host (Optional[str]):
                Hostname of the Redis server. Defaults to 'localhost'.

            redis_port (Optional[int]):
                Redis server port. Defaults to 6379.

            redis_db (Optional[int]):
                Redis database index. Defaults to 0.

            redis_decode_responses (Optional[bool]):
                Decode replies to str. Defaults to True, which the DAOs require.

            redis_username (Optional[str]):
                ACL username, if any.

            redis_password (Optional[str]):
                Password, if any.

            redis_socket_timeout (Optional[float]):
                Seconds to wait for a reply. A redirect or a sweep never
                blocks longer than this on Redis; an elapsed timeout surfaces
                as DataStoreError. Defaults to 5.

            redis_client (Optional[redis.Redis]):
                Existing client, e.g. the one of a sibling DAO.

            prefix (Optional[str]):
                Key namespace, usually app_prefix() ('<app name>:<app env>').

        Raises:
            DataStoreError:
                If Redis does not answer the PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True if Redis answered, False if not and raise_error is False.

        Raises:
            DataStoreError:
                If Redis is unreachable or too slow and raise_error is True.
        """
        try:
            self.redis.ping()
        except REDIS_UNAVAILABLE_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_address(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
