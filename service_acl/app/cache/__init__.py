"""
Cache package.

Two tiers guard the backing store: an in-process mapping that is always
present, and an optional external provider (Redis) shared between
processes. ``build_permission_cache`` composes them.
"""

from .permission_cache import (
    CacheProvider,
    LocalPermissionCache,
    PermissionCache,
    ProviderPermissionCache,
    build_permission_cache,
    permission_cache_key,
)
from .redis_cache import RedisCacheProvider

__all__ = [
    "CacheProvider",
    "LocalPermissionCache",
    "PermissionCache",
    "ProviderPermissionCache",
    "RedisCacheProvider",
    "build_permission_cache",
    "permission_cache_key",
]
