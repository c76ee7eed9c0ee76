"""Build the link store and notification inbox for the configured backend.

Example:
    >>> from shortlinks.dao.factory import build_daos
    >>> link_dao, notification_dao = build_daos({'redis': {'host': 'localhost', 'port': 6379, 'db': 0}}, prefix='shortlinks:dev')
"""

import logging

from shortlinks.dao.base import LinkBaseDAO, NotificationBaseDAO
from shortlinks.dao.memory import LinkMemoryDAO, NotificationMemoryDAO
from shortlinks.dao.redis import LinkRedisDAO, NotificationRedisDAO
from shortlinks.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

# Memory stores live for the lifetime of the process (one per warm lambda container)
_memory_daos: tuple[LinkMemoryDAO, NotificationMemoryDAO] | None = None


def build_daos(app_config: dict, prefix: str | None = None) -> tuple[LinkBaseDAO, NotificationBaseDAO]:
    """Create DAOs for the backend present in a lambda's config

    Args:
        app_config (dict):
            Output of load_config(), e.g. {'redis': {...}, 'lifecycle': {...}}.
        prefix (str | None):
            Redis key namespace, usually app_prefix().

    Returns:
        tuple[LinkBaseDAO, NotificationBaseDAO]

    Raises:
        BadConfigurationError:
            If the config holds no supported backend section.
        DataStoreError:
            If the Redis backend is unreachable.
    """
    global _memory_daos

    if 'redis' in app_config:
        logger.debug('Using Redis as the backend for links and notifications.')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        # Both DAOs share one connection pool
        link_dao = LinkRedisDAO(**redis_config, prefix=prefix)
        notification_dao = NotificationRedisDAO(redis_client=link_dao.redis, prefix=prefix)
        return link_dao, notification_dao

    if 'memory' in app_config:
        logger.debug('Using in-process memory as the backend for links and notifications.')
        if _memory_daos is None:
            _memory_daos = (LinkMemoryDAO(), NotificationMemoryDAO())
        return _memory_daos

    raise BadConfigurationError(f'No supported backend in configuration (given sections: {sorted(app_config)}).')
