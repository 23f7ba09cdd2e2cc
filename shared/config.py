"""
Shared configuration management for the ACL engine.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class AclSettings(BaseConfig):
    """Settings for the ACL engine, read from ``ACL_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ACL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Backing store
    database_url: str = Field(default="sqlite:///acl.db")
    permissions_table: str = Field(default="acl_permissions")
    create_schema: bool = Field(default=False)

    # Mask builder, as a dotted import path
    action_codec: str = Field(default="service_acl.app.mask.BasicMaskBuilder")

    # External cache (absent -> in-process caching only)
    redis_url: Optional[str] = Field(default=None)
    cache_ttl_seconds: Optional[int] = Field(default=3600)
    cache_key_prefix: str = Field(default="acl:permission:")
    local_cache_size: Optional[int] = Field(default=10000, ge=1)

    # Observability
    enable_metrics: bool = Field(default=False)


def get_settings(**overrides) -> AclSettings:
    """Get ACL settings, applying explicit overrides on top of the environment."""
    return AclSettings(**overrides)
