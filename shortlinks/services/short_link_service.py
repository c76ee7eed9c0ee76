"""Short link lifecycle: code allocation and the redirect decision state machine.

Classes:
    ShortLinkService:
        create_link() allocates a code and stores a new link.
        handle_redirect() resolves a code to its original URL while enforcing
        expiry and click quotas.

Example:
    >>> from shortlinks.dao.memory import LinkMemoryDAO, NotificationMemoryDAO
    >>> service = ShortLinkService(LinkMemoryDAO(), NotificationMemoryDAO(), link_ttl_seconds=3600)
    >>> link = service.create_link('user-1', 'https://example.com', max_clicks=1)
    >>> service.handle_redirect(link.code)
    'https://example.com'
    >>> service.handle_redirect(link.code) is None
    True
"""

import logging
from datetime import datetime, timedelta, UTC

from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO, NotificationBaseDAO
from shortlinks.dao.exceptions import LinkAlreadyExistsError
from shortlinks.exceptions import CodeGenerationExhaustedError
from shortlinks.services.helpers import notify_owner
from shortlinks.utils.config import LifecycleConfig
from shortlinks.utils.shortener import generate_shortcode
from shortlinks.utils.constants import (
    CODE_SCOPE_GLOBAL,
    CODE_SCOPE_USER,
    DEFAULT_CODE_SCOPE,
    DEFAULT_LINK_TTL_SECONDS,
    MAX_SHORTCODE_ATTEMPTS,
    SHORTCODE_LENGTH,
)
from shortlinks.services.constants import (
    INACTIVE_LINK_ATTEMPT_MESSAGE,
    LINK_EXPIRED_MESSAGE,
    CLICK_LIMIT_REACHED_MESSAGE,
    LINK_CREATED,
    CODE_COLLISION,
    CODE_GENERATION_EXHAUSTED,
    LINK_NOT_FOUND,
    INACTIVE_LINK_ATTEMPT,
    LINK_EXPIRED,
    CLICK_LIMIT_REACHED,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


class ShortLinkService:
    """Create links and decide redirects

    Attributes:
        link_dao (LinkBaseDAO):
            Link store.
        notification_dao (NotificationBaseDAO):
            Inbox receiving messages for link owners.
        link_ttl_seconds (int):
            Lifetime of new links.
        code_scope (str):
            'user' or 'global' shortcode uniqueness.
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        notification_dao: NotificationBaseDAO,
        link_ttl_seconds: int = DEFAULT_LINK_TTL_SECONDS,
        code_scope: str = DEFAULT_CODE_SCOPE,
    ):
        if code_scope not in {CODE_SCOPE_USER, CODE_SCOPE_GLOBAL}:
            raise ValueError(f"code_scope must be '{CODE_SCOPE_USER}' or '{CODE_SCOPE_GLOBAL}' (given value: {code_scope!r}).")

        self.link_dao = link_dao
        self.notification_dao = notification_dao
        self.link_ttl_seconds = link_ttl_seconds
        self.code_scope = code_scope

    @classmethod
    def from_config(
        cls,
        link_dao: LinkBaseDAO,
        notification_dao: NotificationBaseDAO,
        lifecycle: LifecycleConfig,
    ) -> 'ShortLinkService':
        return cls(
            link_dao,
            notification_dao,
            link_ttl_seconds=lifecycle.link_ttl_seconds,
            code_scope=lifecycle.code_scope,
        )

    def create_link(self, user_id: str, original_url: str, max_clicks: int = 0) -> LinkModel:
        """Allocate a free code and store a new link

        Codes are drawn at random and checked against the store. Every draw
        counts as an attempt; the draw past MAX_SHORTCODE_ATTEMPTS fails
        without being checked, so at most MAX_SHORTCODE_ATTEMPTS checks run.
        A code stored by a concurrent request between the check and the
        insert counts as a collision too.

        Args:
            user_id (str):
                Owner of the new link, supplied by the caller.
            original_url (str):
                Redirect target. Not validated beyond being non-empty.
            max_clicks (int):
                Click quota, 0 for unlimited.

        Returns:
            LinkModel: the stored link.

        Raises:
            ValueError:
                If an argument is invalid. Nothing is stored.
            CodeGenerationExhaustedError:
                If every checked code was already taken. Nothing is stored.
            DataStoreError:
                If the link store is unavailable.
        """
        if not user_id:
            raise ValueError('user_id must be a non-empty string.')
        if not original_url:
            raise ValueError('original_url must be a non-empty string.')
        if isinstance(max_clicks, bool) or not isinstance(max_clicks, int) or max_clicks < 0:
            raise ValueError(f'max_clicks must be a non-negative integer (given value: {max_clicks!r}).')

        attempts = 0
        while True:
            code = generate_shortcode(SHORTCODE_LENGTH)
            attempts += 1
            if attempts > MAX_SHORTCODE_ATTEMPTS:
                break
            if self._code_taken(code, user_id):
                logger.debug('Shortcode collision.', extra={'code': code, 'user_id': user_id, 'event': CODE_COLLISION})
                continue

            created_at = datetime.now(UTC)
            link = LinkModel(
                user_id=user_id,
                code=code,
                original_url=original_url,
                max_clicks=max_clicks,
                created_at=created_at,
                expires_at=created_at + timedelta(seconds=self.link_ttl_seconds),
            )
            try:
                stored = self.link_dao.save(link)
            except LinkAlreadyExistsError:
                # A concurrent request of the same user stored this code after our check
                logger.debug('Shortcode collision on insert.', extra={'code': code, 'user_id': user_id, 'event': CODE_COLLISION})
                continue

            logger.info(
                'Created short link.',
                extra={'code': stored.code, 'user_id': user_id, 'max_clicks': max_clicks, 'event': LINK_CREATED},
            )
            return stored

        logger.error(
            'Could not allocate a free shortcode.',
            extra={'user_id': user_id, 'attempts': MAX_SHORTCODE_ATTEMPTS, 'event': CODE_GENERATION_EXHAUSTED},
        )
        raise CodeGenerationExhaustedError(f'Failed to generate a unique shortcode after {MAX_SHORTCODE_ATTEMPTS} attempts.')

    def handle_redirect(self, code: str) -> str | None:
        """Resolve a code to its original URL

        Procedure:
        - Step 1: Look the link up by code (across all users)
        - Step 2: Reject inactive links
        - Step 3: Deactivate and reject expired links
        - Step 4: Deactivate and reject links whose click quota is already used up
        - Step 5: Count the click (atomic conditional increment)
        - Step 6: Deactivate the link if this click used up its quota, the
                  click itself still succeeds

        Owners are notified of deactivations by the caller which performed
        them, and of every attempt on an already inactive link.

        Args:
            code (str):
                Short code from the request.

        Returns:
            str | None: the original URL, None if the link is not available.

        Raises:
            DataStoreError:
                If the link store is unavailable.
        """
        # 1- Look the link up
        link = self.link_dao.find_by_code(code)
        if link is None:
            logger.info('Link not found.', extra={'code': code, 'event': LINK_NOT_FOUND})
            return None

        # 2- Reject inactive links
        if not link.active:
            logger.info('Attempt on inactive link.', extra={'code': code, 'event': INACTIVE_LINK_ATTEMPT})
            notify_owner(self.notification_dao, link.user_id, INACTIVE_LINK_ATTEMPT_MESSAGE.format(code=code))
            return None

        # 3- Reject expired links
        if link.is_expired(datetime.now(UTC)):
            logger.info('Link expired.', extra={'code': code, 'event': LINK_EXPIRED})
            self._deactivate(link, LINK_EXPIRED_MESSAGE)
            return None

        # 4- Reject links with an exhausted click quota
        if link.quota_reached():
            logger.info('Click limit already reached.', extra={'code': code, 'event': CLICK_LIMIT_REACHED})
            self._deactivate(link, CLICK_LIMIT_REACHED_MESSAGE)
            return None

        # 5- Count the click
        clicks = self.link_dao.increment_clicks(link)
        if clicks is None:
            # Concurrent redirects used up the quota (or deactivated the link) since step 1
            logger.info('Click refused by the link store.', extra={'code': code, 'event': CLICK_LIMIT_REACHED})
            self._deactivate(link, CLICK_LIMIT_REACHED_MESSAGE)
            return None

        # 6- This click used up the quota
        if not link.unlimited and clicks >= link.max_clicks:
            logger.info(
                'Click limit reached by this redirect.',
                extra={'code': code, 'clicks': clicks, 'event': CLICK_LIMIT_REACHED},
            )
            self._deactivate(link, CLICK_LIMIT_REACHED_MESSAGE)

        logger.info('Redirecting to original URL.', extra={'code': code, 'clicks': clicks, 'event': REDIRECT_SUCCESS})
        return link.original_url

    def _code_taken(self, code: str, user_id: str) -> bool:
        if self.code_scope == CODE_SCOPE_GLOBAL:
            return self.link_dao.exists_by_code(code)
        return self.link_dao.exists_by_code_and_user_id(code, user_id)

    def _deactivate(self, link: LinkModel, message: str) -> bool:
        """Deactivate a link and notify its owner if this call flipped it"""
        flipped = self.link_dao.deactivate(link)
        if flipped:
            notify_owner(self.notification_dao, link.user_id, message.format(code=link.code))
        return flipped
