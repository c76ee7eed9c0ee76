"""Data Access Object (DAO) implementation for user notifications in Redis

Data layout (all keys namespaced by the optional prefix):
    notifications:counter                   STRING  notification id sequence
    notifications:<id>                      HASH    notification fields
    users:<user_id>:notifications           ZSET    notification ids scored by creation time
    users:<user_id>:notifications:viewed    SET     ids the user has already viewed

Example:
    >>> from shortlinks.dao.redis import NotificationRedisDAO

    >>> dao = NotificationRedisDAO(prefix="shortlinks:dev")
    >>> dao.send('user-1', 'Link expired: aB3xY9').id
    1
    >>> dao.mark_viewed('user-1', [1])
    1
"""

import logging
from datetime import datetime, UTC

from beartype import beartype

from shortlinks.models import NotificationModel
from shortlinks.dao.base import NotificationBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error, deserialize_notification


logger = logging.getLogger(__name__)


class NotificationRedisDAO(RedisClientMixin, NotificationBaseDAO):
    """Redis-based notification inbox

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    @handle_redis_connection_error
    @beartype
    def send(self, user_id: str, message: str, **kwargs) -> NotificationModel:
        """Durably record a message for a user

        The notification hash and the inbox entry are written in one
        MULTI/EXEC transaction, so a notification is never stored without
        being listed in the user's inbox.
        """
        notification_id = int(self.redis.incr(self.keys.notification_counter_key()))
        notification = NotificationModel(
            id=notification_id,
            user_id=user_id,
            message=message,
            created_at=datetime.now(UTC),
        )

        with self.redis.pipeline(transaction=True) as pipe:
            # fmt: off
            pipe.hset(self.keys.notification_key(notification_id), mapping={
                'id': notification_id,
                'user_id': user_id,
                'message': message,
                'created_at': notification.created_at.isoformat(),
            })
            # fmt: on
            pipe.zadd(self.keys.user_notifications_key(user_id), {notification_id: notification.created_at.timestamp()})
            pipe.execute()

        logger.info('Notification sent.', extra={'user_id': user_id, 'notification_id': notification_id})
        return notification

    @handle_redis_connection_error
    @beartype
    def inbox(self, user_id: str, unviewed_only: bool = False, **kwargs) -> list[NotificationModel]:
        notification_ids = self.redis.zrange(self.keys.user_notifications_key(user_id), 0, -1)
        if unviewed_only:
            viewed = self.redis.smembers(self.keys.user_viewed_notifications_key(user_id))
            notification_ids = [i for i in notification_ids if i not in viewed]
        if not notification_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for notification_id in notification_ids:
                pipe.hgetall(self.keys.notification_key(notification_id))
            rows = pipe.execute()

        return [deserialize_notification(data) for data in rows if data]

    @handle_redis_connection_error
    @beartype
    def mark_viewed(self, user_id: str, notification_ids: list[int], **kwargs) -> int:
        owned = set(self.redis.zrange(self.keys.user_notifications_key(user_id), 0, -1))
        to_mark = [str(i) for i in notification_ids if str(i) in owned]
        if not to_mark:
            return 0
        return int(self.redis.sadd(self.keys.user_viewed_notifications_key(user_id), *to_mark))
