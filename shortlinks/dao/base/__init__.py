from shortlinks.dao.base.link_base_dao import LinkBaseDAO
from shortlinks.dao.base.notification_base_dao import NotificationBaseDAO


__all__ = [
    'LinkBaseDAO',
    'NotificationBaseDAO',
]
