"""
deferred-index-sync core package

Batches content-change notifications into periodic bulk updates to a
search index.
"""

__version__ = "1.0.0"

from .models import SyncConfig, QdrantConfig, ProcessContext, SyncSettings
from .sync import (
    SyncManager, SyncHooks, SyncQueue, UnitOfWork, BulkIndexer, IndexableBinding, IndexableRegistry
)

__all__ = [
    "SyncConfig",
    "QdrantConfig",
    "ProcessContext",
    "SyncSettings",
    "SyncManager",
    "SyncHooks",
    "SyncQueue",
    "UnitOfWork",
    "BulkIndexer",
    "IndexableBinding",
    "IndexableRegistry"
]
