# Notification messages sent to link owners
INACTIVE_LINK_ATTEMPT_MESSAGE = 'Attempt to follow an inactive link: {code}'
LINK_EXPIRED_MESSAGE = 'Link expired: {code}'
CLICK_LIMIT_REACHED_MESSAGE = 'Click limit reached: {code}'
LINK_EXPIRED_AND_DEACTIVATED_MESSAGE = 'Link expired and was deactivated: {code}'

# Structured log events
LINK_CREATED = 'LINK_CREATED'
CODE_COLLISION = 'CODE_COLLISION'
CODE_GENERATION_EXHAUSTED = 'CODE_GENERATION_EXHAUSTED'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
INACTIVE_LINK_ATTEMPT = 'INACTIVE_LINK_ATTEMPT'
LINK_EXPIRED = 'LINK_EXPIRED'
CLICK_LIMIT_REACHED = 'CLICK_LIMIT_REACHED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
NOTIFICATION_FAILED = 'NOTIFICATION_FAILED'
SWEEP_COMPLETED = 'SWEEP_COMPLETED'
SWEEP_FAILED = 'SWEEP_FAILED'
