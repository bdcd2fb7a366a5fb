"""
Bulk indexer and indexable binding interfaces.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .manager import SyncManager

logger = logging.getLogger(__name__)


class BulkIndexer(ABC):
    """
    Writes a batch of objects of one indexable to the search index.

    Implementations own their network/storage behavior and error handling;
    sync managers never inspect the return value.
    """

    @abstractmethod
    def bulk_index(self, indexable_slug: str, object_ids: List[int]) -> Any:
        """
        Index the given objects.

        Args:
            indexable_slug: Slug of the indexable the ids belong to
            object_ids: Ids in first-queued order
        """
        pass


class IndexableBinding(ABC):
    """
    Content-type specific wiring for a sync manager.

    One implementation per indexable connects the host's change
    notifications (object saved, deleted, ...) to the manager's queue.
    """

    @abstractmethod
    def setup(self, manager: "SyncManager") -> None:
        """Bind hooks for this indexable type"""
        pass


class NullBinding(IndexableBinding):
    """Binding for indexables whose ids are queued directly by the caller"""

    def setup(self, manager: "SyncManager") -> None:
        logger.debug(f"No bindings for {manager.indexable_slug}")


class RecordingIndexer(BulkIndexer):
    """In-memory indexer that records every bulk index call"""

    def __init__(self):
        self.calls: List[Tuple[str, List[int]]] = []

    def bulk_index(self, indexable_slug: str, object_ids: List[int]) -> List[int]:
        ids = list(object_ids)
        self.calls.append((indexable_slug, ids))
        logger.debug(f"Recorded bulk index of {len(ids)} {indexable_slug} objects")
        return ids

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def indexed_ids(self) -> List[int]:
        """Every id indexed so far, across calls"""
        return [object_id for _, ids in self.calls for object_id in ids]

    def reset(self) -> None:
        self.calls.clear()
