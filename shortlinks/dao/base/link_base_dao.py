"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for all Link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-memory, PostgreSQL).

Responsibilities:
    - Provide an interface for saving, looking up and purging LinkModel objects.
    - Provide atomic click accounting and deactivation primitives, so that
      concurrent redirects never lose an increment or overshoot a click quota.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)
        >>> link = dao.save(link)
        >>> link.id
        1

        >>> dao.find_by_code('aB3xY9').original_url
        'https://example.com/blog/article-123'

        >>> dao.increment_clicks(link)
        1
        >>> dao.deactivate(link)
        True
        >>> dao.deactivate(link)
        False
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        find_by_code(code: str, **kwargs) -> LinkModel | None:
            Global lookup by code (not scoped to a user).

        exists_by_code_and_user_id(code: str, user_id: str, **kwargs) -> bool:
            True if the user already owns a link with this code.

        exists_by_code(code: str, **kwargs) -> bool:
            True if any user owns a link with this code.

        save(link: LinkModel, **kwargs) -> LinkModel:
            Upsert by identity. Assigns an id on insert.

        find_expired_before(timestamp: datetime, **kwargs) -> list[LinkModel]:
            All links whose expires_at is strictly before timestamp.

        delete_batch(links: list[LinkModel], **kwargs) -> None:
            Purge every given link. Missing links are ignored.

        increment_clicks(link: LinkModel, **kwargs) -> int | None:
            Atomic conditional increment-and-fetch of the click counter.

        deactivate(link: LinkModel, **kwargs) -> bool:
            Atomic active -> inactive transition.

    Subclassing:
        Datastore-specific implementations (e.g., LinkRedisDAO or
        LinkMemoryDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def find_by_code(self, code: str, **kwargs) -> LinkModel | None:
        """Retrieve a LinkModel by its code, across all users.

        Args:
            code (str):
                The code of the link to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel | None: The link if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists_by_code_and_user_id(self, code: str, user_id: str, **kwargs) -> bool:
        """Check whether a user already owns a link with the given code.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists_by_code(self, code: str, **kwargs) -> bool:
        """Check whether any user owns a link with the given code.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert or update a LinkModel.

        A link without an id is inserted and returned with its newly assigned id.
        A link with an id updates the stored record. Updates never re-activate
        an inactive link and never move the click counter backwards.

        Args:
            link (LinkModel):
                The LinkModel instance to be stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: the stored link (with its id).

        Raises:
            LinkAlreadyExistsError:
                On insert, if the owner already holds a link with the same code.

            LinkNotFoundError:
                On update, if no link with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_expired_before(self, timestamp: datetime, **kwargs) -> list[LinkModel]:
        """Retrieve all links whose expires_at lies strictly before timestamp.

        Both active and inactive links are returned.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete_batch(self, links: list[LinkModel], **kwargs) -> None:
        """Delete every given link with all of its indexes.

        Deleting an already deleted link is a no-op.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def increment_clicks(self, link: LinkModel, **kwargs) -> int | None:
        """Atomically increment a link's click counter and return the new value.

        The increment is performed as one indivisible operation, and only if the
        stored link is still active and its quota (if any) is not yet full.

        Returns:
            int | None:
                The click count after the increment, or None if the increment
                was refused (link missing, inactive, or quota already reached).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def deactivate(self, link: LinkModel, **kwargs) -> bool:
        """Atomically flip a link from active to inactive.

        Returns:
            bool:
                True only for the caller that performed the transition.
                False if the link was already inactive or no longer exists.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
