import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortlinks:prod" or "shortlinks:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def link_key(self, link_id: int) -> str:
        return f'links:{link_id}'

    @prefix_key
    def link_code_key(self, code: str) -> str:
        return f'links:code:{code}'

    @prefix_key
    def link_expiry_key(self) -> str:
        return 'links:expiry'

    @prefix_key
    def user_codes_key(self, user_id: str) -> str:
        return f'users:{user_id}:codes'

    @prefix_key
    def notification_counter_key(self) -> str:
        return 'notifications:counter'

    @prefix_key
    def notification_key(self, notification_id: int) -> str:
        return f'notifications:{notification_id}'

    @prefix_key
    def user_notifications_key(self, user_id: str) -> str:
        return f'users:{user_id}:notifications'

    @prefix_key
    def user_viewed_notifications_key(self, user_id: str) -> str:
        return f'users:{user_id}:notifications:viewed'
