"""
Deferred index synchronization.

Queues changed object ids during a unit of work and bulk indexes them
in batches instead of writing to the search index once per change.

Key Components:
- SyncQueue: Deduplicating set of pending object ids
- SyncHooks: Observer registration for queue and flush notifications
- UnitOfWork: End-of-work and redirect lifecycle signals
- ChunkLimitTrigger: Early flush once the queue outgrows the chunk limit
- SyncManager: Per-indexable queue owner and flush procedure
- IndexableRegistry: Indexers and bindings per indexable slug
"""

from .events import SyncEventType, SyncEvent, QueueItemAdded, QueueItemRemoved, ObjectSynced
from .hooks import SyncHooks
from .queue import SyncQueue, normalize_object_id
from .lifecycle import UnitOfWork
from .triggers import ChunkLimitTrigger
from .indexer import BulkIndexer, IndexableBinding, NullBinding, RecordingIndexer
from .permissions import bypass_permission_checks_for_machines, machine_bypass_filter
from .manager import SyncManager
from .registry import IndexableRegistry, IndexableRegistration

__all__ = [
    "SyncEventType",
    "SyncEvent",
    "QueueItemAdded",
    "QueueItemRemoved",
    "ObjectSynced",
    "SyncHooks",
    "SyncQueue",
    "normalize_object_id",
    "UnitOfWork",
    "ChunkLimitTrigger",
    "BulkIndexer",
    "IndexableBinding",
    "NullBinding",
    "RecordingIndexer",
    "bypass_permission_checks_for_machines",
    "machine_bypass_filter",
    "SyncManager",
    "IndexableRegistry",
    "IndexableRegistration",
]
