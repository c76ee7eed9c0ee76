from shortlinks.models.link_model import LinkModel
from shortlinks.models.notification_model import NotificationModel


__all__ = [
    'LinkModel',
    'NotificationModel',
]
