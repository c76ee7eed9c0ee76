from .short_link_service import ShortLinkService
from .cleanup_sweeper import CleanupSweeper, SweepReport
from .helpers import notify_owner


__all__ = [
    'ShortLinkService',
    'CleanupSweeper',
    'SweepReport',
    'notify_owner',
]
