"""
Configuration models for qdrant-harness.

Handles global harness settings and per-manager Qdrant connection setup.
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_COLLECTION = "qdrant-harness-default"
DEFAULT_RETRIES = 3
SERVICE_PREFIX = "qdrant.manager."

VALID_DISTANCES = {'cosine', 'euclidean', 'dot', 'manhattan'}


def _validate_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.startswith(('http://', 'https://')):
        raise ValueError('Qdrant URL must start with http:// or https://')
    return v.rstrip('/')


def _validate_distance(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if v.lower() not in VALID_DISTANCES:
        raise ValueError(f'Distance metric must be one of: {sorted(VALID_DISTANCES)}')
    return v.lower()


class ManagerConfig(BaseModel):
    """Connection and collection settings for one named manager.

    Unset values fall back to the global ``HarnessSettings`` defaults.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )

    collection: str

    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: Optional[float] = Field(default=None, ge=1.0, le=300.0)

    vector_size: Optional[int] = Field(default=None, ge=1, le=65536)
    distance: Optional[str] = None
    bulk_size: Optional[int] = Field(default=None, ge=1, le=10000)

    @field_validator('collection')
    @classmethod
    def validate_collection(cls, v: str) -> str:
        """Validate collection name"""
        if not v or not v.replace('-', '').replace('_', '').replace('.', '').isalnum():
            raise ValueError('Collection name must be alphanumeric with dashes, dots or underscores')
        return v

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _validate_url(v)

    @field_validator('distance')
    @classmethod
    def validate_distance(cls, v: Optional[str]) -> Optional[str]:
        return _validate_distance(v)


def _default_managers() -> Dict[str, ManagerConfig]:
    return {"default": ManagerConfig(collection=DEFAULT_COLLECTION)}


class HarnessSettings(BaseSettings):
    """Global harness settings with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix="QDRANT_HARNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Connection defaults
    url: str = "http://localhost:6333"
    api_key: Optional[str] = None
    timeout: float = Field(default=30.0, ge=1.0, le=300.0)

    # Test execution
    retries: int = Field(default=DEFAULT_RETRIES, ge=0, le=100)
    service_prefix: str = SERVICE_PREFIX

    # Collection defaults
    vector_size: int = Field(default=4, ge=1, le=65536)
    distance: str = "dot"
    bulk_size: int = Field(default=100, ge=1, le=10000)

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    managers: Dict[str, ManagerConfig] = Field(default_factory=_default_managers)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _validate_url(v)

    @field_validator('distance')
    @classmethod
    def validate_distance(cls, v: str) -> str:
        return _validate_distance(v)

    def service_name(self, name: str) -> str:
        """Resolver service name for a manager name"""
        return f"{self.service_prefix}{name}"

    def manager_config(self, name: str) -> ManagerConfig:
        """Get a manager's configuration with every default filled in"""
        config = self.managers[name]
        return ManagerConfig(
            collection=config.collection,
            url=config.url or self.url,
            api_key=config.api_key if config.api_key is not None else self.api_key,
            timeout=config.timeout or self.timeout,
            vector_size=config.vector_size or self.vector_size,
            distance=config.distance or self.distance,
            bulk_size=config.bulk_size or self.bulk_size
        )
