# Thread-safe in-memory link store, for local runs and tests.

import logging
from dataclasses import replace
from datetime import datetime
from threading import Lock

from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


logger = logging.getLogger(__name__)


class LinkMemoryDAO(LinkBaseDAO):
    """In-memory LinkBaseDAO

    Every operation runs under a single lock, which makes increment_clicks()
    and deactivate() atomic with respect to each other.
    """

    def __init__(self) -> None:
        self._links: dict[int, LinkModel] = {}
        self._counter = 0
        self._lock: Lock = Lock()

    def find_by_code(self, code: str, **kwargs) -> LinkModel | None:
        with self._lock:
            matches = [link for link in self._links.values() if link.code == code]
        if len(matches) > 1:
            logger.warning(
                'Code is held by several links, resolving to the earliest one.',
                extra={'code': code, 'link_ids': [link.id for link in matches]},
            )
        return min(matches, key=lambda link: (link.created_at, link.id)) if matches else None

    def exists_by_code_and_user_id(self, code: str, user_id: str, **kwargs) -> bool:
        with self._lock:
            return self._held_by(code, user_id)

    def exists_by_code(self, code: str, **kwargs) -> bool:
        with self._lock:
            return any(link.code == code for link in self._links.values())

    def save(self, link: LinkModel, **kwargs) -> LinkModel:
        with self._lock:
            if link.id is None:
                if self._held_by(link.code, link.user_id):
                    raise LinkAlreadyExistsError(f"User '{link.user_id}' already holds a link with code '{link.code}'.")
                self._counter += 1
                stored = replace(link, id=self._counter)
            else:
                current = self._links.get(link.id)
                if current is None:
                    raise LinkNotFoundError(f"Link with id '{link.id}' not found.")
                stored = replace(
                    current,
                    clicks=max(current.clicks, link.clicks),
                    active=current.active and link.active,
                )
            self._links[stored.id] = stored
            return stored

    def find_expired_before(self, timestamp: datetime, **kwargs) -> list[LinkModel]:
        with self._lock:
            return [link for link in self._links.values() if link.expires_at < timestamp]

    def delete_batch(self, links: list[LinkModel], **kwargs) -> None:
        with self._lock:
            for link in links:
                self._links.pop(link.id, None)

    def increment_clicks(self, link: LinkModel, **kwargs) -> int | None:
        with self._lock:
            current = self._links.get(link.id)
            if current is None or not current.active or current.quota_reached():
                return None
            self._links[link.id] = replace(current, clicks=current.clicks + 1)
            return current.clicks + 1

    def deactivate(self, link: LinkModel, **kwargs) -> bool:
        with self._lock:
            current = self._links.get(link.id)
            if current is None or not current.active:
                return False
            self._links[link.id] = replace(current, active=False)
            return True

    def _held_by(self, code: str, user_id: str) -> bool:
        """Caller must hold self._lock."""
        return any(link.code == code and link.user_id == user_id for link in self._links.values())
