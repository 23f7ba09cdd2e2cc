"""
Permission caches: in-process tier and provider-backed tier.

The cache is advisory. It never creates or deletes backing store rows;
the engine keeps it coherent after every store write.
"""

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Optional, Protocol, Type

from shared.logging import get_logger
from shared.metrics import AclMetrics
from ..model.permission import Permission

DEFAULT_KEY_PREFIX = "acl:permission:"
DEFAULT_LOCAL_MAX_SIZE = 10000


def permission_cache_key(requester_id: str, resource_id: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Deterministic composite key for a (requester, resource) pair.

    Identifiers are hashed together so separators inside them cannot
    make two different pairs collide.
    """
    digest = hashlib.sha1(json.dumps([requester_id, resource_id]).encode()).hexdigest()
    return f"{prefix}{digest}"


class CacheProvider(Protocol):
    """External key/value cache shared across processes."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class PermissionCache(Protocol):
    """Keyed permission store consulted before the backing store."""

    def get(self, requester_id: str, resource_id: str) -> Optional[Permission]:
        ...

    def add(self, permission: Permission) -> None:
        ...

    def remove(self, permission: Permission) -> None:
        ...


class LocalPermissionCache:
    """In-process permission cache with LRU eviction.

    Reads fill the cache as well as writes, so it is bounded by ``max_size``
    entries; the least recently used entry is evicted first. ``None``
    disables the bound.
    """

    def __init__(
        self,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        metrics: Optional[AclMetrics] = None,
        max_size: Optional[int] = DEFAULT_LOCAL_MAX_SIZE
    ):
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be a positive integer or None")
        self.key_prefix = key_prefix
        self.metrics = metrics
        self.max_size = max_size
        self._entries: "OrderedDict[str, Permission]" = OrderedDict()
        self._lock = threading.Lock()

    def key(self, requester_id: str, resource_id: str) -> str:
        return permission_cache_key(requester_id, resource_id, self.key_prefix)

    def get(self, requester_id: str, resource_id: str) -> Optional[Permission]:
        key = self.key(requester_id, resource_id)
        with self._lock:
            permission = self._entries.get(key)
            if permission is not None:
                self._entries.move_to_end(key)
        if self.metrics:
            self.metrics.record_cache_lookup("local", permission is not None)
        return permission

    def add(self, permission: Permission) -> None:
        key = self.key(permission.requester_id, permission.resource_id)
        with self._lock:
            self._entries[key] = permission
            self._entries.move_to_end(key)
            if self.max_size is not None:
                while len(self._entries) > self.max_size:
                    self._entries.popitem(last=False)

    def remove(self, permission: Permission) -> None:
        with self._lock:
            self._entries.pop(self.key(permission.requester_id, permission.resource_id), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, permission: Permission) -> bool:
        return self.key(permission.requester_id, permission.resource_id) in self._entries


class ProviderPermissionCache:
    """In-process tier composed with an external cache provider.

    Lookups check the local tier first, then the provider; provider hits
    are deserialized and back-filled into the local tier.
    """

    def __init__(
        self,
        provider: CacheProvider,
        mask_builder_class: Type,
        local: Optional[LocalPermissionCache] = None,
        metrics: Optional[AclMetrics] = None
    ):
        self.provider = provider
        self.mask_builder_class = mask_builder_class
        self.local = local if local is not None else LocalPermissionCache(metrics=metrics)
        self.metrics = metrics
        self.logger = get_logger("acl.cache.provider")

    def get(self, requester_id: str, resource_id: str) -> Optional[Permission]:
        permission = self.local.get(requester_id, resource_id)
        if permission is not None:
            return permission

        key = self.local.key(requester_id, resource_id)
        cached_data = self.provider.get(key)
        if self.metrics:
            self.metrics.record_cache_lookup("provider", cached_data is not None)
        if cached_data is None:
            return None

        permission = Permission.from_dict(json.loads(cached_data), self.mask_builder_class)
        self.local.add(permission)

        self.logger.debug("Provider cache hit", cache_key=key, mask=permission.get_mask())
        return permission

    def add(self, permission: Permission) -> None:
        self.local.add(permission)
        key = self.local.key(permission.requester_id, permission.resource_id)
        self.provider.set(key, json.dumps(permission.to_dict()))

    def remove(self, permission: Permission) -> None:
        self.local.remove(permission)
        self.provider.delete(self.local.key(permission.requester_id, permission.resource_id))


def build_permission_cache(
    provider: Optional[CacheProvider],
    mask_builder_class: Type,
    key_prefix: str = DEFAULT_KEY_PREFIX,
    metrics: Optional[AclMetrics] = None,
    local_max_size: Optional[int] = DEFAULT_LOCAL_MAX_SIZE
):
    """Local-only cache without a provider, provider-backed cache otherwise."""
    local = LocalPermissionCache(key_prefix=key_prefix, metrics=metrics, max_size=local_max_size)
    if provider is None:
        return local
    return ProviderPermissionCache(provider, mask_builder_class, local=local, metrics=metrics)
