from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LinkModel:
    """Represent a short link and its lifecycle state.

    Attributes:
        user_id (str):
            Identifier of the user who owns the link.
        code (str):
            Short alphanumeric token used to look the link up.
        original_url (str):
            The redirect target. Never changes after creation.
        max_clicks (int):
            Maximum number of successful redirects. 0 means unlimited.
        expires_at (datetime):
            Absolute deadline computed as created_at + TTL at creation time.
        created_at (datetime):
            Creation timestamp (UTC).
        clicks (int):
            Number of successful redirects so far. Only ever increases.
        active (bool):
            True until the link is deactivated. Never flips back to True.
        id (Optional[int]):
            Store-assigned identity. None until the link is saved.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> link = LinkModel(
        ...     user_id='5f0c0c51-0c1f-4c1e-9e63-6c4b2f0e2a11',
        ...     code='aB3xY9',
        ...     original_url='https://example.com/article/123',
        ...     max_clicks=10,
        ...     created_at=now,
        ...     expires_at=now + timedelta(days=1),
        ... )
        >>> link.clicks
        0
        >>> link.active
        True
        >>> link.quota_reached()
        False
    """

    user_id: str
    code: str
    original_url: str
    max_clicks: int
    created_at: datetime
    expires_at: datetime
    clicks: int = 0
    active: bool = True
    id: int | None = None

    def __post_init__(self):
        if not self.user_id:
            raise ValueError('Link owner (user_id) must be a non-empty string.')
        if not self.code:
            raise ValueError('Link code must be a non-empty string.')
        if not self.original_url:
            raise ValueError('Link original_url must be a non-empty string.')
        if self.max_clicks < 0:
            raise ValueError(f'max_clicks must be a non-negative integer (given value: {self.max_clicks}).')
        if self.clicks < 0:
            raise ValueError(f'clicks must be a non-negative integer (given value: {self.clicks}).')

    @property
    def unlimited(self) -> bool:
        return self.max_clicks == 0

    def is_expired(self, now: datetime) -> bool:
        """True if the link's deadline lies strictly before `now`."""
        return self.expires_at < now

    def quota_reached(self) -> bool:
        """True if a click quota is set and the counter has reached it."""
        return not self.unlimited and self.clicks >= self.max_clicks
