"""
Sync Hooks.

Explicit observer registration for sync notifications, flush interception
and permission bypass filters. Each manager is handed a SyncHooks
instance; several managers may share one so that a single listener sees
every indexable.
"""

import logging
from typing import Any, Callable, Dict, List, TYPE_CHECKING

from .events import QueueItemAdded, QueueItemRemoved, ObjectSynced

if TYPE_CHECKING:
    from .manager import SyncManager

logger = logging.getLogger(__name__)

AddedListener = Callable[[QueueItemAdded], None]
RemovedListener = Callable[[QueueItemRemoved], None]
SyncedListener = Callable[[ObjectSynced], None]

# (bail, manager, indexable_slug) -> bail
FlushInterceptor = Callable[[bool, "SyncManager", str], bool]

# (bypass, entity_id, indexable_slug) -> bypass
PermissionBypassFilter = Callable[[bool, Any, str], bool]


class SyncHooks:
    """
    Registry of listeners and filters used by sync managers.

    Listeners are notified in registration order. Filters are chained:
    each receives the value returned by the previous one, starting from
    the caller's initial value. Exceptions raised by listeners or filters
    propagate to the code that triggered the notification.
    """

    def __init__(self):
        self._added_listeners: List[AddedListener] = []
        self._removed_listeners: List[RemovedListener] = []
        self._synced_listeners: List[SyncedListener] = []
        self._flush_interceptors: List[FlushInterceptor] = []
        self._insert_bypass_filters: List[PermissionBypassFilter] = []
        self._delete_bypass_filters: List[PermissionBypassFilter] = []

    # Registration

    def on_added(self, listener: AddedListener) -> AddedListener:
        """Register a listener fired after an id is queued"""
        self._added_listeners.append(listener)
        return listener

    def on_removed(self, listener: RemovedListener) -> RemovedListener:
        """Register a listener fired after an id is removed from the queue"""
        self._removed_listeners.append(listener)
        return listener

    def on_object_synced(self, listener: SyncedListener) -> SyncedListener:
        """Register a listener fired for each id of a batch being flushed"""
        self._synced_listeners.append(listener)
        return listener

    def add_flush_interceptor(self, interceptor: FlushInterceptor) -> FlushInterceptor:
        """
        Register a pre-flush interceptor.

        Returning True from the interceptor skips the flush and keeps the
        queued ids for a later attempt.
        """
        self._flush_interceptors.append(interceptor)
        return interceptor

    def add_insert_permissions_bypass(self, bypass_filter: PermissionBypassFilter) -> PermissionBypassFilter:
        """Register a filter deciding whether index permission checks are skipped"""
        self._insert_bypass_filters.append(bypass_filter)
        return bypass_filter

    def add_delete_permissions_bypass(self, bypass_filter: PermissionBypassFilter) -> PermissionBypassFilter:
        """Register a filter deciding whether delete permission checks are skipped"""
        self._delete_bypass_filters.append(bypass_filter)
        return bypass_filter

    # Removal

    def remove_added(self, listener: AddedListener) -> None:
        """Remove an "added" listener"""
        self._discard(self._added_listeners, listener)

    def remove_removed(self, listener: RemovedListener) -> None:
        """Remove a "removed" listener"""
        self._discard(self._removed_listeners, listener)

    def remove_object_synced(self, listener: SyncedListener) -> None:
        """Remove a per-id flush listener"""
        self._discard(self._synced_listeners, listener)

    def remove_flush_interceptor(self, interceptor: FlushInterceptor) -> None:
        """Remove a pre-flush interceptor"""
        self._discard(self._flush_interceptors, interceptor)

    def remove_insert_permissions_bypass(self, bypass_filter: PermissionBypassFilter) -> None:
        """Remove an insert permission bypass filter"""
        self._discard(self._insert_bypass_filters, bypass_filter)

    def remove_delete_permissions_bypass(self, bypass_filter: PermissionBypassFilter) -> None:
        """Remove a delete permission bypass filter"""
        self._discard(self._delete_bypass_filters, bypass_filter)

    @staticmethod
    def _discard(callbacks: List[Callable], callback: Callable) -> None:
        # Unknown callbacks are ignored
        if callback in callbacks:
            callbacks.remove(callback)

    # Dispatch

    def emit_added(self, event: QueueItemAdded) -> None:
        logger.debug(f"Dispatching {event}")
        for listener in list(self._added_listeners):
            listener(event)

    def emit_removed(self, event: QueueItemRemoved) -> None:
        logger.debug(f"Dispatching {event}")
        for listener in list(self._removed_listeners):
            listener(event)

    def emit_object_synced(self, event: ObjectSynced) -> None:
        for listener in list(self._synced_listeners):
            listener(event)

    def should_bail(self, manager: "SyncManager", indexable_slug: str) -> bool:
        """Ask the flush interceptors whether the flush should be skipped"""
        bail = False
        for interceptor in list(self._flush_interceptors):
            bail = bool(interceptor(bail, manager, indexable_slug))
        return bail

    def filter_insert_permissions_bypass(self, bypass: bool, entity_id: Any, indexable_slug: str) -> bool:
        """Run the insert permission bypass filters"""
        return self._apply_bypass_filters(self._insert_bypass_filters, bypass, entity_id, indexable_slug)

    def filter_delete_permissions_bypass(self, bypass: bool, entity_id: Any, indexable_slug: str) -> bool:
        """Run the delete permission bypass filters"""
        return self._apply_bypass_filters(self._delete_bypass_filters, bypass, entity_id, indexable_slug)

    def _apply_bypass_filters(
        self,
        filters: List[PermissionBypassFilter],
        bypass: bool,
        entity_id: Any,
        indexable_slug: str
    ) -> bool:
        for bypass_filter in list(filters):
            bypass = bypass_filter(bypass, entity_id, indexable_slug)
        return bypass

    def get_listener_counts(self) -> Dict[str, int]:
        """Get the number of registered callbacks per hook"""
        return {
            "added": len(self._added_listeners),
            "removed": len(self._removed_listeners),
            "object_synced": len(self._synced_listeners),
            "flush_interceptors": len(self._flush_interceptors),
            "insert_permissions_bypass": len(self._insert_bypass_filters),
            "delete_permissions_bypass": len(self._delete_bypass_filters)
        }
