"""
Storage package for deferred-index-sync.

Provides the Qdrant-backed bulk indexer.
"""

from .qdrant_indexer import QdrantBulkIndexer, DocumentLoader

__all__ = [
    "QdrantBulkIndexer",
    "DocumentLoader"
]
