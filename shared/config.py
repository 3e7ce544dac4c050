"""
Shared configuration management for the Relief Coordination service.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # HTTP surface
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5001)
    client_url: str = Field(default="http://localhost:1234")

    # Storage
    mongo_uri: str = Field(default="mongodb://localhost:27017/disaster-response")
    mongo_database: Optional[str] = Field(default=None)
    cache_backend: Literal["mongo", "redis"] = Field(default="mongo")
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Ownership of created records
    mock_user_id: str = Field(default="mock-user-id")

    # Text extraction
    gemini_api_key: Optional[str] = Field(default=None)
    gemini_model: str = Field(default="gemini-1.5-flash-latest")

    # Geocoding
    geocoder_provider: Literal["openstreetmap", "google"] = Field(default="openstreetmap")
    geocoder_api_key: Optional[str] = Field(default=None)
    geocoder_user_agent: str = Field(default="relief-coordination-service")

    # Outbound HTTP
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Third-party updates
    social_media_feed_url: Optional[str] = Field(default=None)
    social_media_cache_ttl: int = Field(default=600, ge=1)
    official_updates_cache_ttl: int = Field(default=3600, ge=1)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "disasters"


def get_config(service_name: str = "disasters", **overrides) -> ServiceConfig:
    """Build the immutable configuration for a service, once at startup."""
    return ServiceConfig(service_name=service_name, **overrides)
