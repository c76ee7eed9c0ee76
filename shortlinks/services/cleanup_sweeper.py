"""Periodic purge of expired links

Classes:
    SweepReport:
        Counters of a single sweep.
    CleanupSweeper:
        tick() fetches every expired link once, deactivates (and notifies the
        owner of) those still active, then deletes the whole batch once.
        run()/start() repeat tick() on a fixed interval.

Example:
    >>> sweeper = CleanupSweeper(link_dao, notification_dao, interval_seconds=60)
    >>> sweeper.tick()
    SweepReport(fetched=3, deactivated=1, deleted=3)
    >>> stop = threading.Event()
    >>> thread = sweeper.start(stop)
    >>> stop.set()
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, UTC

from shortlinks.dao.base import LinkBaseDAO, NotificationBaseDAO
from shortlinks.dao.exceptions import DAOError
from shortlinks.services.helpers import notify_owner
from shortlinks.utils.constants import DEFAULT_CLEANUP_INTERVAL_SECONDS
from shortlinks.services.constants import (
    LINK_EXPIRED_AND_DEACTIVATED_MESSAGE,
    SWEEP_COMPLETED,
    SWEEP_FAILED,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepReport:
    fetched: int
    deactivated: int
    deleted: int

    def to_dict(self) -> dict[str, int]:
        return {'fetched': self.fetched, 'deactivated': self.deactivated, 'deleted': self.deleted}


class CleanupSweeper:
    """Deactivate and purge links whose expiry lies in the past

    Attributes:
        link_dao (LinkBaseDAO):
            Link store.
        notification_dao (NotificationBaseDAO):
            Inbox receiving "expired and deactivated" messages.
        interval_seconds (float):
            Delay between two ticks of run().
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        notification_dao: NotificationBaseDAO,
        interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
    ):
        if interval_seconds <= 0:
            raise ValueError(f'interval_seconds must be positive (given value: {interval_seconds!r}).')

        self.link_dao = link_dao
        self.notification_dao = notification_dao
        self.interval_seconds = interval_seconds

    def tick(self) -> SweepReport:
        """Run one sweep

        The batch is fetched once. delete_batch() is called exactly once with
        that batch, after every deactivation, and not at all if the batch is
        empty.

        Raises:
            DataStoreError:
                If the link store is unavailable. Links deactivated before the
                failure stay deactivated; the next tick fetches them again.
        """
        batch = self.link_dao.find_expired_before(datetime.now(UTC))

        deactivated = 0
        for link in batch:
            if not link.active:
                continue
            if self.link_dao.deactivate(link):
                deactivated += 1
                notify_owner(
                    self.notification_dao,
                    link.user_id,
                    LINK_EXPIRED_AND_DEACTIVATED_MESSAGE.format(code=link.code),
                )

        if batch:
            self.link_dao.delete_batch(batch)

        report = SweepReport(fetched=len(batch), deactivated=deactivated, deleted=len(batch))
        logger.info('Cleanup sweep completed.', extra={**report.to_dict(), 'event': SWEEP_COMPLETED})
        return report

    def run(self, stop_event: threading.Event) -> None:
        """Tick until stop_event is set, waiting interval_seconds between ticks"""
        while not stop_event.is_set():
            try:
                self.tick()
            except DAOError:
                logger.exception('Cleanup sweep failed.', extra={'event': SWEEP_FAILED})
            stop_event.wait(self.interval_seconds)

    def start(self, stop_event: threading.Event | None = None) -> threading.Thread:
        """Run the sweep loop on a daemon thread

        Returns:
            threading.Thread: the started thread. Set stop_event to end it.
        """
        stop_event = stop_event if stop_event is not None else threading.Event()
        thread = threading.Thread(
            target=self.run,
            args=(stop_event,),
            name='cleanup-sweeper',
            daemon=True,
        )
        thread.start()
        return thread
