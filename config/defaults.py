"""
Default configuration values for deferred-index-sync.

Centralized defaults that can be overridden by environment variables or config files.
"""

import copy
from typing import Any, Dict

# Global default settings
DEFAULT_SETTINGS = {
    # Sync queue
    "sync": {
        "chunk_limit": None  # Disabled
    },

    # Qdrant configuration for the reference bulk indexer
    "qdrant": {
        "url": "http://localhost:6333",
        "api_key": None,
        "timeout": 60.0,
        "collection_prefix": "deferred-sync",
        "batch_size": 100
    },

    # Process context flags for the permission bypass
    "context": {
        "is_scheduled_task": False,
        "is_admin_cli": False
    },

    # Logging
    "logging": {
        "level": "INFO"
    }
}

# Environment variable mappings
ENV_VAR_MAPPING = {
    'DEFERRED_SYNC_CHUNK_LIMIT': 'sync.chunk_limit',
    'DEFERRED_SYNC_QDRANT_URL': 'qdrant.url',
    'DEFERRED_SYNC_QDRANT_API_KEY': 'qdrant.api_key',
    'DEFERRED_SYNC_QDRANT_TIMEOUT': 'qdrant.timeout',
    'DEFERRED_SYNC_COLLECTION_PREFIX': 'qdrant.collection_prefix',
    'DEFERRED_SYNC_BATCH_SIZE': 'qdrant.batch_size',
    'DEFERRED_SYNC_DOING_CRON': 'context.is_scheduled_task',
    'DEFERRED_SYNC_ADMIN_CLI': 'context.is_admin_cli',
    'DEFERRED_SYNC_LOG_LEVEL': 'logging.level'
}

# Values that must stay strings even when they look numeric or boolean
STRING_SETTINGS = {'qdrant.api_key', 'qdrant.collection_prefix', 'qdrant.url', 'logging.level'}


def get_default_settings() -> Dict[str, Any]:
    """Get a mutable copy of the default settings"""
    return copy.deepcopy(DEFAULT_SETTINGS)
