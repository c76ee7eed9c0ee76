import logging

from shortlinks.dao.base import NotificationBaseDAO
from shortlinks.dao.exceptions import DAOError
from shortlinks.services.constants import NOTIFICATION_FAILED


__all__ = ['notify_owner']

logger = logging.getLogger(__name__)


def notify_owner(notification_dao: NotificationBaseDAO, user_id: str, message: str) -> bool:
    """Send a notification without letting a delivery failure escape

    Notifications are side effects of a state change which is already
    durable, so a failure is logged and reported to the caller as False.

    Returns:
        bool: True if the notification was recorded.
    """
    try:
        notification_dao.send(user_id, message)
    except DAOError:
        logger.exception(
            'Failed to notify link owner.',
            extra={'user_id': user_id, 'notification': message, 'event': NOTIFICATION_FAILED},
        )
        return False
    return True
