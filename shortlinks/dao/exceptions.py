"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a LinkModel is not found in the data store.

    LinkAlreadyExistsError:
        Raised when attempting to insert a LinkModel whose identity is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, time, OOM, etc.).

    NotificationError:
        Raised when a notification cannot be recorded for a user.

Example:
    >>> from shortlinks.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with id '42' not found.")
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.LinkNotFoundError: Link with id '42' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkNotFoundError(DAOError):
    """Exception raised when a LinkModel is not found in the data store."""

    pass


class LinkAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a LinkModel that already exists in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass


class NotificationError(DAOError):
    """Exception raised when a notification cannot be recorded."""

    pass
