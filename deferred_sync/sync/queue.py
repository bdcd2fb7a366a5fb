"""
Sync Queue.

Deduplicating in-memory set of object ids waiting to be bulk indexed.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from .events import QueueItemAdded, QueueItemRemoved
from .hooks import SyncHooks

logger = logging.getLogger(__name__)


def normalize_object_id(value: Any) -> Optional[int]:
    """
    Convert a candidate object id to a non-negative integer.

    Accepts ints, integral floats and strings of ASCII digits (surrounding
    whitespace allowed). Returns None for anything else, including bools.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value if value >= 0 else None

    if isinstance(value, float):
        if value.is_integer() and value >= 0:
            return int(value)
        return None

    if isinstance(value, str):
        stripped = value.strip()
        if stripped and stripped.isascii() and stripped.isdigit():
            try:
                return int(stripped)
            except ValueError:
                # Longer than the interpreter's int conversion limit
                return None
        return None

    return None


class SyncQueue:
    """
    Pending object ids for a single indexable.

    Keys keep first-seen order. Adding an id that is already queued keeps
    its original position.
    """

    def __init__(self, indexable_slug: str, hooks: Optional[SyncHooks] = None):
        """
        Initialize an empty sync queue.

        Args:
            indexable_slug: Slug of the indexable the queued ids belong to
            hooks: Hook registry notified after each mutation
        """
        self.indexable_slug = indexable_slug
        self.hooks = hooks or SyncHooks()
        self._queue: Dict[int, bool] = {}
        self.queue_id = uuid.uuid4().hex

    def add(self, object_id: Any) -> bool:
        """
        Add an object id to the queue.

        Args:
            object_id: Id of the changed object

        Returns:
            True if the id was queued, False if it is not a valid id
        """
        normalized = normalize_object_id(object_id)
        if normalized is None:
            logger.warning(f"Rejected invalid object id for {self.indexable_slug}: {object_id!r}")
            return False

        self._queue[normalized] = True
        logger.debug(f"Queued {self.indexable_slug}#{normalized} (queue size: {len(self._queue)})")

        self.hooks.emit_added(QueueItemAdded(
            indexable_slug=self.indexable_slug,
            object_id=normalized,
            sync_queue=self.snapshot(),
            queue_id=self.queue_id
        ))
        return True

    def remove(self, object_id: Any) -> bool:
        """
        Remove an object id from the queue. Missing ids are not an error.

        Returns:
            True unless the id is invalid
        """
        normalized = normalize_object_id(object_id)
        if normalized is None:
            logger.warning(f"Rejected invalid object id for {self.indexable_slug}: {object_id!r}")
            return False

        self._queue.pop(normalized, None)
        logger.debug(f"Unqueued {self.indexable_slug}#{normalized} (queue size: {len(self._queue)})")

        self.hooks.emit_removed(QueueItemRemoved(
            indexable_slug=self.indexable_slug,
            object_id=normalized,
            sync_queue=self.snapshot(),
            queue_id=self.queue_id
        ))
        return True

    def ids(self) -> List[int]:
        """Queued ids in first-seen order"""
        return list(self._queue.keys())

    def snapshot(self) -> Dict[int, bool]:
        """Copy of the current queue"""
        return dict(self._queue)

    def clear(self) -> int:
        """Clear all ids from the queue and return count cleared"""
        count = len(self._queue)
        self._queue = {}
        return count

    @property
    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, object_id: Any) -> bool:
        normalized = normalize_object_id(object_id)
        return normalized is not None and normalized in self._queue

    def __iter__(self):
        return iter(self.ids())
