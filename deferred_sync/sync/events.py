"""
Sync Event Models.

Typed payloads for the notifications a sync manager publishes while
queueing and flushing object ids.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class SyncEventType(Enum):
    """Notifications published by the sync queue and flush procedure"""
    ADDED = "added"                 # Object id queued
    REMOVED = "removed"             # Object id dropped from the queue
    OBJECT_SYNCED = "object_synced" # Per-id notification during a flush


class SyncEvent(BaseModel):
    """Base payload shared by all sync notifications"""
    model_config = ConfigDict(frozen=True)

    event_type: SyncEventType
    indexable_slug: str
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization"""
        data = self.model_dump()
        data["event_type"] = self.event_type.value
        data["timestamp"] = self.timestamp.isoformat()
        return data


class QueueItemAdded(SyncEvent):
    """
    Fired after an object id is added to the sync queue.

    ``sync_queue`` is a copy of the queue taken right after the insertion,
    so listeners cannot mutate the manager's state through it.
    """
    event_type: SyncEventType = SyncEventType.ADDED
    object_id: int
    sync_queue: Dict[int, bool] = Field(default_factory=dict)
    queue_id: Optional[str] = None  # identity of the emitting SyncQueue

    @property
    def queue_size(self) -> int:
        return len(self.sync_queue)

    def __str__(self) -> str:
        return f"ADDED: {self.indexable_slug}#{self.object_id} (queue size: {self.queue_size})"


class QueueItemRemoved(SyncEvent):
    """Fired after an object id is removed from the sync queue"""
    event_type: SyncEventType = SyncEventType.REMOVED
    object_id: int
    sync_queue: Dict[int, bool] = Field(default_factory=dict)
    queue_id: Optional[str] = None  # identity of the emitting SyncQueue

    @property
    def queue_size(self) -> int:
        return len(self.sync_queue)

    def __str__(self) -> str:
        return f"REMOVED: {self.indexable_slug}#{self.object_id} (queue size: {self.queue_size})"


class ObjectSynced(SyncEvent):
    """Fired once per queued id right before the batch is bulk indexed"""
    event_type: SyncEventType = SyncEventType.OBJECT_SYNCED
    object_id: int

    def __str__(self) -> str:
        return f"SYNCED: {self.indexable_slug}#{self.object_id}"
