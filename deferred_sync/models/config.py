"""
Configuration models for deferred-index-sync.

Handles sync queue thresholds, Qdrant connection settings and the
process context consulted by the permission bypass policy.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncConfig(BaseModel):
    """Sync queue configuration"""
    model_config = ConfigDict(validate_assignment=True)

    # Queue size above which an early flush is forced (None disables it)
    chunk_limit: Optional[int] = Field(default=None, ge=0)

    @property
    def has_chunk_limit(self) -> bool:
        """Check if threshold-based flushing is enabled"""
        return self.chunk_limit is not None


class QdrantConfig(BaseModel):
    """Qdrant connection settings for the reference bulk indexer"""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )

    # Connection settings
    url: str = "http://localhost:6333"
    api_key: Optional[str] = None
    timeout: float = 60.0

    # Collection naming
    collection_prefix: str = "deferred-sync"

    # Performance settings
    batch_size: int = Field(default=100, ge=1, le=1000)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate Qdrant URL format"""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Qdrant URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('collection_prefix')
    @classmethod
    def validate_collection_prefix(cls, v: str) -> str:
        """Validate collection prefix"""
        if not v or not v.replace('-', '').replace('_', '').isalnum():
            raise ValueError('Collection prefix must be alphanumeric with dashes/underscores')
        return v.lower()

    def get_collection_name(self, indexable_slug: str) -> str:
        """Generate collection name for an indexable"""
        safe_slug = indexable_slug.lower().replace(' ', '-').replace('_', '-')
        safe_prefix = self.collection_prefix.replace('_', '-')
        return f"{safe_prefix}-{safe_slug}"


class ProcessContext(BaseModel):
    """
    Flags describing the process a unit of work runs in.

    Passed explicitly to the permission bypass policy instead of being
    read from process-wide state.
    """
    model_config = ConfigDict(frozen=True)

    is_scheduled_task: bool = False  # cron / scheduled runner
    is_admin_cli: bool = False       # administrative command line

    @property
    def is_automated(self) -> bool:
        """Check if this is a recognized automated background context"""
        return self.is_scheduled_task or self.is_admin_cli

    @classmethod
    def from_settings(cls, settings: 'GlobalSettings') -> 'ProcessContext':
        """Build context from environment-backed settings"""
        return cls(
            is_scheduled_task=settings.doing_cron,
            is_admin_cli=settings.admin_cli
        )


class LoggingConfig(BaseModel):
    """Logging configuration"""
    model_config = ConfigDict(validate_assignment=True)

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lowercase level names"""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class SyncSettings(BaseModel):
    """Complete settings for one process, as assembled by the configuration loader"""
    model_config = ConfigDict(validate_assignment=True)

    sync: SyncConfig = Field(default_factory=SyncConfig)
    qdrant: QdrantConfig = Field(default_factory=QdrantConfig)
    context: ProcessContext = Field(default_factory=ProcessContext)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SyncSettings':
        """Create from dictionary"""
        return cls(**data)


class GlobalSettings(BaseSettings):
    """Global application settings with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix="DEFERRED_SYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Sync defaults
    chunk_limit: Optional[int] = Field(default=None, ge=0)

    # Process context flags
    doing_cron: bool = False
    admin_cli: bool = False

    # Qdrant
    qdrant_url: str = "http://localhost:6333"

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def to_sync_settings(self) -> SyncSettings:
        """Build full sync settings from environment values"""
        return SyncSettings(
            sync=SyncConfig(chunk_limit=self.chunk_limit),
            qdrant=QdrantConfig(url=self.qdrant_url),
            context=ProcessContext.from_settings(self),
            logging=LoggingConfig(level=self.log_level)
        )
