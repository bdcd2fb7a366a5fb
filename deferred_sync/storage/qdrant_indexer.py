"""
Qdrant bulk indexer for deferred-index-sync.

Reference BulkIndexer that writes queued objects of an indexable to a
Qdrant collection, upserting current documents and deleting ids whose
objects no longer exist.
"""

import logging
import time
from typing import Callable, Dict, List, Optional

from qdrant_client import QdrantClient
from qdrant_client.models import PointStruct, PointIdsList

from ..models.config import QdrantConfig
from ..models.storage import IndexDocument, BulkIndexResult
from ..sync.indexer import BulkIndexer

logger = logging.getLogger(__name__)

# (indexable_slug, object_ids) -> {object_id: document, or None if the object is gone}
DocumentLoader = Callable[[str, List[int]], Dict[int, Optional[IndexDocument]]]


class QdrantBulkIndexer(BulkIndexer):
    """
    Bulk indexer backed by Qdrant.

    Features:
    - One collection per indexable slug
    - Batched upserts sized by QdrantConfig.batch_size
    - Deletion of ids the document loader reports as gone
    - Errors are logged and reported in the result, never raised
    """

    def __init__(
        self,
        document_loader: DocumentLoader,
        config: Optional[QdrantConfig] = None,
        client: Optional[QdrantClient] = None
    ):
        """
        Initialize Qdrant bulk indexer.

        Args:
            document_loader: Builds index documents for queued ids
            config: Qdrant connection and collection settings
            client: Preconfigured Qdrant client (created lazily from config if None)
        """
        self.document_loader = document_loader
        self.config = config or QdrantConfig()
        self._client = client

        # Performance tracking
        self._total_requests = 0
        self._failed_requests = 0

        logger.info(f"Initialized QdrantBulkIndexer: {self.config.url}")

    @property
    def client(self) -> QdrantClient:
        """Get Qdrant client instance"""
        if self._client is None:
            self._client = QdrantClient(
                url=self.config.url,
                api_key=self.config.api_key,
                timeout=self.config.timeout
            )
        return self._client

    def bulk_index(self, indexable_slug: str, object_ids: List[int]) -> BulkIndexResult:
        """
        Index the given objects into the indexable's collection.

        Args:
            indexable_slug: Slug of the indexable
            object_ids: Ids to index

        Returns:
            Bulk index result with per-operation counts and errors
        """
        start_time = time.time()
        collection_name = self.config.get_collection_name(indexable_slug)
        result = BulkIndexResult(
            indexable_slug=indexable_slug,
            collection_name=collection_name,
            requested=len(object_ids)
        )

        if not object_ids:
            result.processing_time_ms = 0.0
            return result

        try:
            documents = self.document_loader(indexable_slug, list(object_ids))
        except Exception as e:
            error_msg = f"Failed to load {indexable_slug} documents: {e}"
            logger.error(error_msg)
            result.failed = len(object_ids)
            result.errors.append(error_msg)
            result.processing_time_ms = (time.time() - start_time) * 1000
            return result

        to_upsert = []
        to_delete = []
        for object_id in object_ids:
            document = documents.get(object_id)
            if document is None:
                to_delete.append(object_id)
            else:
                to_upsert.append(document)

        self._upsert_documents(collection_name, to_upsert, result)
        self._delete_documents(collection_name, to_delete, result)

        result.processing_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Bulk indexed {indexable_slug}: {result.indexed} upserted, {result.deleted} deleted, "
            f"{result.failed} failed in {result.processing_time_ms:.2f}ms"
        )
        return result

    def _upsert_documents(
        self,
        collection_name: str,
        documents: List[IndexDocument],
        result: BulkIndexResult
    ) -> None:
        batch_size = self.config.batch_size

        for i in range(0, len(documents), batch_size):
            batch = documents[i:i + batch_size]
            points = [
                PointStruct(
                    id=document.object_id,
                    vector=document.vector,
                    payload=document.payload
                )
                for document in batch
            ]

            self._total_requests += 1
            try:
                self.client.upsert(collection_name=collection_name, points=points)
                result.indexed += len(batch)
                logger.debug(
                    f"Upserted batch {i // batch_size + 1}: "
                    f"{len(batch)} points to {collection_name}"
                )
            except Exception as e:
                self._failed_requests += 1
                error_msg = f"Failed to upsert points to {collection_name}: {e}"
                logger.error(error_msg)
                result.failed += len(batch)
                result.errors.append(error_msg)

    def _delete_documents(
        self,
        collection_name: str,
        object_ids: List[int],
        result: BulkIndexResult
    ) -> None:
        if not object_ids:
            return

        self._total_requests += 1
        try:
            self.client.delete(
                collection_name=collection_name,
                points_selector=PointIdsList(points=object_ids)
            )
            result.deleted += len(object_ids)
        except Exception as e:
            self._failed_requests += 1
            error_msg = f"Failed to delete points from {collection_name}: {e}"
            logger.error(error_msg)
            result.failed += len(object_ids)
            result.errors.append(error_msg)

    def get_performance_metrics(self) -> Dict[str, int]:
        """Get request counters"""
        return {
            "total_requests": self._total_requests,
            "failed_requests": self._failed_requests
        }
