from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NotificationModel:
    """Immutable audit record of a message delivered to a user.

    Viewed/read state is not part of the record, it is tracked by the
    notification inbox (see NotificationBaseDAO.mark_viewed).

    Attributes:
        id (int):
            Store-assigned identity.
        user_id (str):
            Recipient of the message.
        message (str):
            Human-readable message text.
        created_at (datetime):
            Time the message was recorded (UTC).
    """

    id: int
    user_id: str
    message: str
    created_at: datetime
