"""
Sync Manager.

Defers index updates for one indexable during a unit of work and sends
them to the bulk indexer in batches.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..models.config import SyncConfig, ProcessContext
from .events import ObjectSynced
from .hooks import SyncHooks
from .indexer import BulkIndexer, IndexableBinding
from .lifecycle import UnitOfWork
from .permissions import bypass_permission_checks_for_machines
from .queue import SyncQueue
from .triggers import ChunkLimitTrigger, bind_lifecycle, flush_before_redirect

logger = logging.getLogger(__name__)


class SyncManager:
    """
    Queues changed object ids and bulk indexes them later.

    Syncing happens when the unit of work ends, before a redirect leaves
    the unit of work early, and whenever the queue grows past the
    configured chunk limit. Flushing is synchronous; the indexer's result
    is not inspected and the queue is reset after every dispatched batch,
    even when the indexer raises.
    """

    def __init__(
        self,
        indexable_slug: str,
        indexer: BulkIndexer,
        hooks: Optional[SyncHooks] = None,
        config: Optional[SyncConfig] = None,
        lifecycle: Optional[UnitOfWork] = None,
        context: Optional[ProcessContext] = None,
        binding: Optional[IndexableBinding] = None
    ):
        """
        Create a sync manager and wire its triggers.

        Args:
            indexable_slug: Slug of the indexable this manager syncs
            indexer: Collaborator receiving the batched ids
            hooks: Hook registry, shared or private to this manager
            config: Sync settings (chunk limit)
            lifecycle: Unit of work whose shutdown/redirect signals flush the queue
            context: Process flags consulted by the permission bypass
            binding: Content-type specific hook wiring, set up last
        """
        self._indexable_slug = indexable_slug
        self.indexer = indexer
        self.hooks = hooks or SyncHooks()
        self.config = config or SyncConfig()
        self.context = context or ProcessContext()
        self.lifecycle = lifecycle
        self.binding = binding

        self.sync_queue = SyncQueue(indexable_slug, self.hooks)

        # Flush tracking
        self._flush_count = 0
        self._bailed_count = 0
        self._total_synced = 0
        self._last_flush_time: Optional[datetime] = None

        # We also sync when the chunk limit is exceeded, useful when
        # objects are generated programmatically.
        self.chunk_limit_trigger = ChunkLimitTrigger(self)
        if self.config.has_chunk_limit:
            self.hooks.on_added(self.chunk_limit_trigger)

        # All other syncing happens on shutdown or redirect
        if lifecycle is not None:
            bind_lifecycle(self, lifecycle)

        self._bypass_filter = self.filter_bypass_permission_checks_for_machines
        self.hooks.add_insert_permissions_bypass(self._bypass_filter)
        self.hooks.add_delete_permissions_bypass(self._bypass_filter)
        self._attached = True

        if binding is not None:
            binding.setup(self)

        logger.info(
            f"Initialized SyncManager for {indexable_slug} "
            f"(chunk_limit={self.config.chunk_limit})"
        )

    @property
    def indexable_slug(self) -> str:
        return self._indexable_slug

    def add_to_queue(self, object_id: Any) -> bool:
        """
        Add an object to the sync queue.

        Returns:
            False if ``object_id`` is not a valid id
        """
        return self.sync_queue.add(object_id)

    def remove_from_queue(self, object_id: Any) -> bool:
        """
        Remove an object from the sync queue.

        Returns:
            False if ``object_id`` is not a valid id
        """
        return self.sync_queue.remove(object_id)

    def index_sync_on_chunk_limit(self) -> bool:
        """Sync queued objects if the chunk limit is exceeded"""
        if self.chunk_limit_trigger.should_flush(len(self.sync_queue)):
            self.index_sync_queue()
        return True

    def index_sync_queue_on_redirect(self, location: Any) -> Any:
        """
        Sync queued objects before a redirect occurs.

        The end-of-work signal is not guaranteed to fire on a redirect path.

        Returns:
            ``location`` unchanged
        """
        return flush_before_redirect(self, location)

    def index_sync_queue(self) -> None:
        """Sync objects in queue"""
        if self.sync_queue.is_empty:
            return

        if self.hooks.should_bail(self, self.indexable_slug):
            self._bailed_count += 1
            logger.info(
                f"Sync of {len(self.sync_queue)} {self.indexable_slug} objects intercepted, "
                f"keeping queue"
            )
            return

        for object_id in self.sync_queue.ids():
            self.hooks.emit_object_synced(ObjectSynced(
                indexable_slug=self.indexable_slug,
                object_id=object_id
            ))

        object_ids = self.sync_queue.ids()
        logger.info(f"Bulk indexing {len(object_ids)} {self.indexable_slug} objects")

        try:
            self.indexer.bulk_index(self.indexable_slug, object_ids)
        finally:
            # Reset even on failure so a shutdown after a redirect does not resend
            self.sync_queue.clear()
            self._flush_count += 1
            self._total_synced += len(object_ids)
            self._last_flush_time = datetime.now()

    def filter_bypass_permission_checks_for_machines(
        self,
        bypass: bool,
        entity_id: Any,
        indexable_slug: str
    ) -> bool:
        """Allow scheduled tasks and admin CLI processes to index/delete documents"""
        return bypass_permission_checks_for_machines(bypass, entity_id, indexable_slug, self.context)

    def detach(self) -> None:
        """
        Unregister this manager's trigger and bypass filters from its hooks.

        Runs when the unit of work ends. Safe to call twice.
        """
        if not self._attached:
            return

        self.hooks.remove_added(self.chunk_limit_trigger)
        self.hooks.remove_insert_permissions_bypass(self._bypass_filter)
        self.hooks.remove_delete_permissions_bypass(self._bypass_filter)
        self._attached = False
        logger.debug(f"Detached SyncManager for {self.indexable_slug}")

    @property
    def is_attached(self) -> bool:
        return self._attached

    def get_metrics(self) -> Dict[str, Any]:
        """Get flush statistics for this manager"""
        return {
            "indexable_slug": self.indexable_slug,
            "queue_size": len(self.sync_queue),
            "chunk_limit": self.config.chunk_limit,
            "flushes": self._flush_count,
            "bailed_flushes": self._bailed_count,
            "chunk_limit_flushes": self.chunk_limit_trigger.flush_count,
            "objects_synced": self._total_synced,
            "last_flush_time": self._last_flush_time.isoformat() if self._last_flush_time else None
        }

    def __repr__(self) -> str:
        return f"SyncManager(indexable_slug={self.indexable_slug!r}, queued={len(self.sync_queue)})"
