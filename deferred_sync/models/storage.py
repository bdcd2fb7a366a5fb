"""
Storage models for bulk indexing.

Documents handed to the search backend and the result of a bulk index call.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict, computed_field


class IndexDocument(BaseModel):
    """A single object prepared for the search index"""
    model_config = ConfigDict(frozen=True)

    # Object identification
    object_id: int = Field(ge=0)

    # Vector data
    vector: List[float]

    # Payload data for filtering and retrieval
    payload: Dict[str, Any] = Field(default_factory=dict)


class BulkIndexResult(BaseModel):
    """Result of one bulk index call"""

    indexable_slug: str
    collection_name: Optional[str] = None

    # Item counts
    requested: int = 0
    indexed: int = 0
    deleted: int = 0
    failed: int = 0

    # Error information
    errors: List[str] = Field(default_factory=list)

    # Operation metadata
    timestamp: datetime = Field(default_factory=datetime.now)
    processing_time_ms: Optional[float] = None

    @computed_field
    @property
    def success(self) -> bool:
        """Computed property for success status"""
        return self.failed == 0 and not self.errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "indexable_slug": self.indexable_slug,
            "collection_name": self.collection_name,
            "requested": self.requested,
            "indexed": self.indexed,
            "deleted": self.deleted,
            "failed": self.failed,
            "success": self.success,
            "processing_time_ms": self.processing_time_ms,
            "errors": self.errors
        }
