"""Abstract base class for Notification data access objects (DAOs).

A notification DAO is the user's inbox: it durably records messages and
keeps track of which of them the user has already viewed. Records are
immutable once sent, viewed state is kept next to them.

Example:
    >>> from shortlinks.dao.redis import NotificationRedisDAO

    >>> dao = NotificationRedisDAO(...)
    >>> dao.send('user-1', 'Link expired: aB3xY9')
    NotificationModel(id=1, user_id='user-1', message='Link expired: aB3xY9', ...)
    >>> [n.message for n in dao.inbox('user-1', unviewed_only=True)]
    ['Link expired: aB3xY9']
    >>> dao.mark_viewed('user-1', [1])
    1
    >>> dao.inbox('user-1', unviewed_only=True)
    []
"""

from abc import ABC, abstractmethod

from shortlinks.models import NotificationModel


class NotificationBaseDAO(ABC):
    """Interface for Notification data access objects (DAOs).

    Methods:
        send(user_id: str, message: str, **kwargs) -> NotificationModel:
            Durably record a message for a user.

        inbox(user_id: str, unviewed_only: bool = False, **kwargs) -> list[NotificationModel]:
            List a user's notifications, oldest first.

        mark_viewed(user_id: str, notification_ids: list[int], **kwargs) -> int:
            Mark notifications as viewed, returns how many were newly marked.
    """

    @abstractmethod
    def send(self, user_id: str, message: str, **kwargs) -> NotificationModel:
        """Record a message for a user.

        Raises:
            NotificationError:
                If the message could not be recorded.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def inbox(self, user_id: str, unviewed_only: bool = False, **kwargs) -> list[NotificationModel]:
        """List a user's notifications, oldest first.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def mark_viewed(self, user_id: str, notification_ids: list[int], **kwargs) -> int:
        """Mark the given notifications of a user as viewed.

        Ids that do not belong to the user are ignored.

        Returns:
            int: number of notifications that were not viewed before.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
