from shortlinks.dao.memory.link_memory_dao import LinkMemoryDAO
from shortlinks.dao.memory.notification_memory_dao import NotificationMemoryDAO


__all__ = [
    'LinkMemoryDAO',
    'NotificationMemoryDAO',
]
