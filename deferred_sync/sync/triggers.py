"""
Flush Triggers.

Decide when a sync manager flushes its queue: when the queue grows past
the chunk limit, at the end of the unit of work and before a redirect.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from .events import QueueItemAdded
from .lifecycle import UnitOfWork

if TYPE_CHECKING:
    from .manager import SyncManager

logger = logging.getLogger(__name__)


class ChunkLimitTrigger:
    """
    Flushes a manager's queue once it holds more than ``chunk_limit`` ids.

    Bounds memory during long programmatic runs that queue many ids
    within a single unit of work.
    """

    def __init__(self, manager: "SyncManager"):
        self.manager = manager
        self.flush_count = 0

    @property
    def chunk_limit(self) -> Optional[int]:
        return self.manager.config.chunk_limit

    def should_flush(self, queue_size: int) -> bool:
        return self.chunk_limit is not None and queue_size > self.chunk_limit

    def __call__(self, event: QueueItemAdded) -> bool:
        # Shared hook registries deliver other queues' events too
        if event.queue_id != self.manager.sync_queue.queue_id:
            return True

        queue_size = len(self.manager.sync_queue)
        if self.should_flush(queue_size):
            logger.info(
                f"Chunk limit {self.chunk_limit} exceeded for {self.manager.indexable_slug} "
                f"({queue_size} queued), flushing early"
            )
            self.flush_count += 1
            self.manager.index_sync_queue()
        return True


def bind_lifecycle(manager: "SyncManager", lifecycle: UnitOfWork) -> None:
    """
    Flush the manager's queue at the end of the unit of work and before
    redirects, then unregister its hooks once the unit of work has ended.
    """
    def flush_and_detach() -> None:
        try:
            manager.index_sync_queue()
        finally:
            manager.detach()

    lifecycle.on_shutdown(flush_and_detach)
    lifecycle.on_redirect(manager.index_sync_queue_on_redirect)


def flush_before_redirect(manager: "SyncManager", location: Any) -> Any:
    """Flush unconditionally and hand the redirect location back unchanged"""
    manager.index_sync_queue()
    return location
