"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Responsibilities:
    - Insert, update, look up and purge links;
    - Maintain the code, per-user code and expiry indexes;
    - Count clicks and deactivate links atomically (server-side Lua scripts);
    - Provide defensive error handling and raise appropriate DAO exceptions.

Data layout (all keys namespaced by the optional prefix):
    links:counter               STRING  link id sequence
    links:<id>                  HASH    link fields
    links:code:<code>           ZSET    link ids holding the code, scored by creation time
    users:<user_id>:codes       SET     codes owned by the user
    links:expiry                ZSET    link ids scored by expires_at (epoch seconds)

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from shortlinks.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="shortlinks:dev")
    >>> link = dao.save(link)
    >>> dao.find_by_code(link.code).original_url
    'https://example.com/page'
    >>> dao.increment_clicks(link)
    1
"""

import logging
from dataclasses import replace
from datetime import datetime

from beartype import beartype

from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error, serialize_link, deserialize_link
from shortlinks.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


logger = logging.getLogger(__name__)


# KEYS: link, code index, user codes, expiry index
# ARGV: id, code, created_at score, expires_at score, hash field/value pairs...
INSERT_LINK_LUA = r"""
if redis.call('SISMEMBER', KEYS[3], ARGV[2]) == 1 then
  return 0
end

redis.call('HSET', KEYS[1], unpack(ARGV, 5))
redis.call('ZADD', KEYS[2], ARGV[3], ARGV[1])
redis.call('SADD', KEYS[3], ARGV[2])
redis.call('ZADD', KEYS[4], ARGV[4], ARGV[1])
return 1
"""

# KEYS: link
# ARGV: clicks, active
UPDATE_LINK_LUA = r"""
if redis.call('EXISTS', KEYS[1]) == 0 then
  return 0
end

-- clicks never decrease, links never re-activate
local clicks = tonumber(redis.call('HGET', KEYS[1], 'clicks'))
if tonumber(ARGV[1]) > clicks then
  redis.call('HSET', KEYS[1], 'clicks', ARGV[1])
end
if ARGV[2] == '0' then
  redis.call('HSET', KEYS[1], 'active', '0')
end
return 1
"""

# KEYS: link
INCREMENT_CLICKS_LUA = r"""
local data = redis.call('HMGET', KEYS[1], 'active', 'clicks', 'max_clicks')
if data[1] ~= '1' then
  return -1
end

local clicks = tonumber(data[2])
local max_clicks = tonumber(data[3])
if max_clicks > 0 and clicks >= max_clicks then
  return -1
end

return redis.call('HINCRBY', KEYS[1], 'clicks', 1)
"""

# KEYS: link
DEACTIVATE_LUA = r"""
if redis.call('HGET', KEYS[1], 'active') == '1' then
  redis.call('HSET', KEYS[1], 'active', '0')
  return 1
end
return 0
"""


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short links

    This class implements the LinkBaseDAO interface using Redis as a data store.
    Every mutation that has to be race-free (insert, click, deactivation) runs as
    a single Lua script, which Redis executes atomically.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Example:
        >>> dao = LinkRedisDAO(redis_host="localhost", prefix="shortlinks:test")
        >>> stored = dao.save(link)
        >>> dao.exists_by_code_and_user_id(stored.code, stored.user_id)
        True
        >>> dao.deactivate(stored)
        True
    """

    @handle_redis_connection_error
    @beartype
    def find_by_code(self, code: str, **kwargs) -> LinkModel | None:
        """Retrieve a link by code, across all users

        When the code is held by several users (possible with per-user code
        uniqueness), the earliest created link wins.

        Args:
            code (str):
                The code of the link to be retrieved.

        Returns:
            LinkModel | None: the link, or None if no link holds the code.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_ids = self.redis.zrange(self.keys.link_code_key(code), 0, -1)
        if len(link_ids) > 1:
            logger.warning(
                'Code is held by several links, resolving to the earliest one.',
                extra={'code': code, 'link_ids': link_ids},
            )

        for link_id in link_ids:
            data = self.redis.hgetall(self.keys.link_key(link_id))
            if data:
                return deserialize_link(data)
        return None

    @handle_redis_connection_error
    @beartype
    def exists_by_code_and_user_id(self, code: str, user_id: str, **kwargs) -> bool:
        return bool(self.redis.sismember(self.keys.user_codes_key(user_id), code))

    @handle_redis_connection_error
    @beartype
    def exists_by_code(self, code: str, **kwargs) -> bool:
        return self.redis.exists(self.keys.link_code_key(code)) > 0

    @handle_redis_connection_error
    @beartype
    def save(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert a new link or update an existing one

        Insert: a new id is drawn from the link counter, then the link hash and
        all of its indexes are written by one Lua script. The script refuses the
        insert if the owner already holds the code, so two concurrent creators
        for the same user can never both store the same code.

        Update: only `clicks` (never backwards) and `active` (only to False)
        are mutable. All other fields are fixed at creation.

        Args:
            link (LinkModel):
                The link to be stored.

        Returns:
            LinkModel: the stored link.

        Raises:
            LinkAlreadyExistsError:
                If the owner already holds a link with the same code (insert).
            LinkNotFoundError:
                If the link has an id but is not stored anymore (update).
            DataStoreError:
                If a Redis connection issue occurs.
        """
        if link.id is None:
            return self._insert(link)
        return self._update(link)

    def _insert(self, link: LinkModel) -> LinkModel:
        link_id = int(self.redis.incr(self.keys.link_counter_key()))
        fields = [item for pair in serialize_link(link, link_id).items() for item in pair]

        inserted = self.redis.eval(
            INSERT_LINK_LUA,
            4,
            self.keys.link_key(link_id),
            self.keys.link_code_key(link.code),
            self.keys.user_codes_key(link.user_id),
            self.keys.link_expiry_key(),
            link_id,
            link.code,
            link.created_at.timestamp(),
            link.expires_at.timestamp(),
            *fields,
        )
        if not int(inserted):
            raise LinkAlreadyExistsError(f"User '{link.user_id}' already holds a link with code '{link.code}'.")

        logger.debug('Inserted link.', extra={'code': link.code, 'link_id': link_id})
        return replace(link, id=link_id)

    def _update(self, link: LinkModel) -> LinkModel:
        link_key = self.keys.link_key(link.id)
        updated = self.redis.eval(UPDATE_LINK_LUA, 1, link_key, link.clicks, int(link.active))
        if not int(updated):
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")

        data = self.redis.hgetall(link_key)
        if not data:  # pragma: no cover (purged between the two calls)
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")
        return deserialize_link(data)

    @handle_redis_connection_error
    @beartype
    def find_expired_before(self, timestamp: datetime, **kwargs) -> list[LinkModel]:
        """Retrieve every link whose expires_at is strictly before timestamp

        Stale expiry index entries (links whose hash is already gone) are skipped.
        """
        link_ids = self.redis.zrangebyscore(self.keys.link_expiry_key(), '-inf', f'({timestamp.timestamp()}')
        if not link_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for link_id in link_ids:
                pipe.hgetall(self.keys.link_key(link_id))
            rows = pipe.execute()

        return [deserialize_link(data) for data in rows if data]

    @handle_redis_connection_error
    @beartype
    def delete_batch(self, links: list[LinkModel], **kwargs) -> None:
        """Delete links together with their index entries

        All deletions run in a single MULTI/EXEC transaction. Deleting links
        which are already gone is a no-op.
        """
        if not links:
            return

        with self.redis.pipeline(transaction=True) as pipe:
            for link in links:
                pipe.delete(self.keys.link_key(link.id))
                pipe.zrem(self.keys.link_code_key(link.code), link.id)
                pipe.srem(self.keys.user_codes_key(link.user_id), link.code)
                pipe.zrem(self.keys.link_expiry_key(), link.id)
            pipe.execute()

        logger.debug('Deleted link batch.', extra={'link_ids': [link.id for link in links]})

    @handle_redis_connection_error
    @beartype
    def increment_clicks(self, link: LinkModel, **kwargs) -> int | None:
        """Atomically count a click for an active link with quota left

        NOTE: The active/quota checks and the HINCRBY run inside one Lua script,
              so two concurrent redirects can never both read `clicks = k` and
              both write `k + 1`:

              (redirect 1): EVAL INCREMENT_CLICKS  -> clicks 4 -> 5 (max_clicks 5)
              (redirect 2): EVAL INCREMENT_CLICKS  -> quota full, refused (-1)

        Returns:
            int | None: new click count, None if the click was refused.
        """
        clicks = int(self.redis.eval(INCREMENT_CLICKS_LUA, 1, self.keys.link_key(link.id)))
        return None if clicks < 0 else clicks

    @handle_redis_connection_error
    @beartype
    def deactivate(self, link: LinkModel, **kwargs) -> bool:
        """Atomically flip active from True to False

        Returns:
            bool: True only for the caller which performed the transition.
        """
        return bool(int(self.redis.eval(DEACTIVATE_LUA, 1, self.keys.link_key(link.id))))
