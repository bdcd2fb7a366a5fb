"""
Core data models for deferred-index-sync

Pydantic models for configuration and storage.
"""

from .config import (
    SyncConfig, QdrantConfig, ProcessContext, LoggingConfig, SyncSettings, GlobalSettings
)
from .storage import IndexDocument, BulkIndexResult

__all__ = [
    # Configuration
    "SyncConfig",
    "QdrantConfig",
    "ProcessContext",
    "LoggingConfig",
    "SyncSettings",
    "GlobalSettings",

    # Storage
    "IndexDocument",
    "BulkIndexResult"
]
