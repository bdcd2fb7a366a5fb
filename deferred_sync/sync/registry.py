"""
Indexable Registry.

Maps indexable slugs to the bulk indexer and binding that serve them,
and builds one sync manager per registered indexable.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.config import SyncConfig, ProcessContext
from .hooks import SyncHooks
from .indexer import BulkIndexer, IndexableBinding
from .lifecycle import UnitOfWork
from .manager import SyncManager

logger = logging.getLogger(__name__)


@dataclass
class IndexableRegistration:
    """Indexer and binding registered for one slug"""
    indexable_slug: str
    indexer: BulkIndexer
    binding: Optional[IndexableBinding] = None


class IndexableRegistry:
    """Registry of indexables available for syncing"""

    def __init__(self):
        self._registrations: Dict[str, IndexableRegistration] = {}

    def register(
        self,
        indexable_slug: str,
        indexer: BulkIndexer,
        binding: Optional[IndexableBinding] = None
    ) -> IndexableRegistration:
        """
        Register an indexable.

        Raises:
            ValueError: If the slug is already registered
        """
        if indexable_slug in self._registrations:
            raise ValueError(f"Indexable already registered: {indexable_slug}")

        registration = IndexableRegistration(indexable_slug, indexer, binding)
        self._registrations[indexable_slug] = registration
        logger.debug(f"Registered indexable {indexable_slug}")
        return registration

    def get(self, indexable_slug: str) -> IndexableRegistration:
        """
        Look up a registered indexable.

        Raises:
            KeyError: If the slug is unknown
        """
        try:
            return self._registrations[indexable_slug]
        except KeyError:
            raise KeyError(f"Unknown indexable: {indexable_slug}") from None

    def slugs(self) -> List[str]:
        return list(self._registrations.keys())

    def __contains__(self, indexable_slug: str) -> bool:
        return indexable_slug in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)

    def create_managers(
        self,
        hooks: Optional[SyncHooks] = None,
        config: Optional[SyncConfig] = None,
        lifecycle: Optional[UnitOfWork] = None,
        context: Optional[ProcessContext] = None
    ) -> Dict[str, SyncManager]:
        """
        Build one sync manager per registered indexable for a unit of work.

        All managers share ``hooks`` so listeners see every indexable.
        """
        hooks = hooks or SyncHooks()
        managers = {}
        for slug, registration in self._registrations.items():
            managers[slug] = SyncManager(
                slug,
                registration.indexer,
                hooks=hooks,
                config=config,
                lifecycle=lifecycle,
                context=context,
                binding=registration.binding
            )
        return managers
