"""
ACL engine: grant, revoke and check permissions.
"""

import threading
from typing import Iterable, List, Optional, Type, Union

from shared.logging import get_logger, requester_context
from shared.metrics import AclMetrics
from .cache import CacheProvider, build_permission_cache
from .cache.permission_cache import DEFAULT_KEY_PREFIX, DEFAULT_LOCAL_MAX_SIZE
from .mask import BasicMaskBuilder, MaskBuilderInterface, resolve_mask_builder
from .model import AclCascadingRequester, AclRequester, AclResource, Permission
from .persistence import PermissionStore

Actions = Union[str, Iterable[str]]

_EXHAUSTED = object()


class Acl:
    """Access-control engine over a permission store and a permission cache.

    Masks are read through the cache, falling back to the store. Writes go
    to the store first and the cache is refreshed (or evicted) afterwards.
    Requesters implementing ``AclCascadingRequester`` inherit permission
    checks from their parents; the parent graph may contain cycles.
    """

    LOCK_STRIPES = 64

    def __init__(
        self,
        store: PermissionStore,
        mask_builder: Union[str, Type] = BasicMaskBuilder,
        cache_provider: Optional[CacheProvider] = None,
        *,
        cache_key_prefix: str = DEFAULT_KEY_PREFIX,
        local_cache_size: Optional[int] = DEFAULT_LOCAL_MAX_SIZE,
        metrics: Optional[AclMetrics] = None
    ):
        self.mask_builder_class = resolve_mask_builder(mask_builder)
        self.store = store
        self.metrics = metrics
        self.cache = build_permission_cache(
            cache_provider,
            self.mask_builder_class,
            key_prefix=cache_key_prefix,
            metrics=metrics,
            local_max_size=local_cache_size
        )
        self.logger = get_logger("acl.engine")

        # Serializes read-modify-write per key within this process only
        self._locks = [threading.Lock() for _ in range(self.LOCK_STRIPES)]

        self.logger.debug(
            "ACL engine initialized",
            mask_builder=self.mask_builder_class.__name__,
            cache=type(self.cache).__name__
        )

    def grant(self, requester: AclRequester, resource: AclResource, actions: Actions) -> None:
        """Grant one or many actions to requester on resource."""
        with requester_context(requester.get_acl_requester_identifier()):
            permission = self._mutate(requester, resource, actions, Permission.grant)
            self.logger.info(
                "Permission granted",
                requester=permission.requester_id,
                resource=permission.resource_id,
                mask=permission.get_mask()
            )

    def revoke(self, requester: AclRequester, resource: AclResource, actions: Actions) -> None:
        """Revoke one or many actions. Revoking from a missing permission is a no-op."""
        with requester_context(requester.get_acl_requester_identifier()):
            permission = self._mutate(requester, resource, actions, Permission.revoke)
            self.logger.info(
                "Permission revoked",
                requester=permission.requester_id,
                resource=permission.resource_id,
                mask=permission.get_mask()
            )

    def is_granted(self, requester: AclRequester, resource: AclResource, action: str) -> bool:
        """Check action for requester on resource, cascading through parents.

        A direct grant wins immediately. Otherwise parents are visited
        depth-first, in the order the requester exposes them; each distinct
        requester identifier is evaluated at most once per call.
        """
        self._new_mask_builder().bit_for(action)

        requester_id = requester.get_acl_requester_identifier()
        with requester_context(requester_id):
            return self._check(requester, requester_id, resource.get_acl_resource_identifier(), action)

    def find_permission(self, requester: AclRequester, resource: AclResource) -> Optional[Permission]:
        """Return a copy of the stored permission, or None when there is none."""
        permission = self._find_permission(
            requester.get_acl_requester_identifier(),
            resource.get_acl_resource_identifier()
        )
        return permission.copy() if permission is not None else None

    def _check(self, requester: AclRequester, requester_id: str, resource_id: str, action: str) -> bool:
        if self._is_directly_granted(requester_id, resource_id, action):
            self._record_decision(True, False)
            return True

        if not isinstance(requester, AclCascadingRequester):
            self._record_decision(False, False)
            return False

        granted = self._is_granted_by_parents(requester, requester_id, resource_id, action)
        self._record_decision(granted, True)
        return granted

    def _mutate(self, requester: AclRequester, resource: AclResource, actions: Actions, operation) -> Permission:
        actions = self._normalize_actions(actions)
        requester_id = requester.get_acl_requester_identifier()
        resource_id = resource.get_acl_resource_identifier()

        with self._lock_for(requester_id, resource_id):
            current = self._find_permission(requester_id, resource_id)
            # Work on a copy so a failed store write leaves the cache untouched
            permission = current.copy() if current is not None else self._init_permission(requester_id, resource_id)

            for action in actions:
                operation(permission, action)

            self._save_permission(permission)

        return permission

    def _is_granted_by_parents(
        self,
        requester: AclCascadingRequester,
        requester_id: str,
        resource_id: str,
        action: str
    ) -> bool:
        visited = {requester_id}
        stack = [iter(requester.get_acl_parent_requesters())]

        while stack:
            parent = next(stack[-1], _EXHAUSTED)
            if parent is _EXHAUSTED:
                stack.pop()
                continue

            parent_id = parent.get_acl_requester_identifier()
            if parent_id in visited:
                continue
            visited.add(parent_id)

            if self._is_directly_granted(parent_id, resource_id, action):
                self.logger.debug(
                    "Permission granted through parent",
                    requester=requester_id,
                    parent=parent_id,
                    resource=resource_id,
                    action=action
                )
                return True

            if isinstance(parent, AclCascadingRequester):
                stack.append(iter(parent.get_acl_parent_requesters()))

        return False

    def _is_directly_granted(self, requester_id: str, resource_id: str, action: str) -> bool:
        permission = self._find_permission(requester_id, resource_id)
        return permission is not None and permission.is_granted(action)

    def _find_permission(self, requester_id: str, resource_id: str) -> Optional[Permission]:
        permission = self.cache.get(requester_id, resource_id)
        if permission is not None:
            return permission

        mask = self.store.fetch_mask(requester_id, resource_id)
        if mask is None:
            self.logger.debug("Permission not found", requester=requester_id, resource=resource_id)
            return None

        permission = self._init_permission(requester_id, resource_id, mask)
        permission.set_persistent(True)
        self.cache.add(permission)

        return permission

    def _init_permission(self, requester_id: str, resource_id: str, mask: int = 0) -> Permission:
        mask_builder = self._new_mask_builder()
        mask_builder.set_mask(mask)
        return Permission(requester_id, resource_id, mask_builder)

    def _save_permission(self, permission: Permission) -> None:
        requester_id = permission.requester_id
        resource_id = permission.resource_id

        if permission.get_mask() == 0:
            if permission.is_persistent():
                self.store.delete(requester_id, resource_id)
            self.cache.remove(permission)
            return

        # A persisted row may have been deleted by another engine since it was cached
        if not permission.is_persistent() or not self.store.update(requester_id, resource_id, permission.get_mask()):
            self.store.insert(requester_id, resource_id, permission.get_mask())
            permission.set_persistent(True)

        self.cache.add(permission)

    def _normalize_actions(self, actions: Actions) -> List[str]:
        if isinstance(actions, str):
            actions = [actions]
        else:
            actions = list(actions)

        # Reject unknown names before anything is mutated
        mask_builder = self._new_mask_builder()
        for action in actions:
            mask_builder.bit_for(action)

        return actions

    def _new_mask_builder(self) -> MaskBuilderInterface:
        return self.mask_builder_class()

    def _lock_for(self, requester_id: str, resource_id: str) -> threading.Lock:
        return self._locks[hash((requester_id, resource_id)) % self.LOCK_STRIPES]

    def _record_decision(self, granted: bool, cascaded: bool) -> None:
        if self.metrics:
            self.metrics.record_decision(granted, cascaded)
