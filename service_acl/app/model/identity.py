"""
Requester and resource capabilities consumed by the engine.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Protocol, runtime_checkable


@runtime_checkable
class AclRequester(Protocol):
    """Party permissions are granted to (user, role, group)."""

    def get_acl_requester_identifier(self) -> str:
        ...


@runtime_checkable
class AclCascadingRequester(AclRequester, Protocol):
    """Requester that also inherits permission checks from parent requesters."""

    def get_acl_parent_requesters(self) -> Iterable[AclRequester]:
        ...


@runtime_checkable
class AclResource(Protocol):
    """Protected object."""

    def get_acl_resource_identifier(self) -> str:
        ...


@dataclass(frozen=True)
class Requester:
    """Plain requester identified by a string."""
    identifier: str

    def get_acl_requester_identifier(self) -> str:
        return self.identifier


@dataclass
class CascadingRequester:
    """Requester with an ordered list of parent requesters.

    The parent graph may contain cycles; the engine bounds its traversal.
    """
    identifier: str
    parents: List[AclRequester] = field(default_factory=list)

    def get_acl_requester_identifier(self) -> str:
        return self.identifier

    def get_acl_parent_requesters(self) -> Iterable[AclRequester]:
        return list(self.parents)

    def add_parent(self, parent: AclRequester) -> "CascadingRequester":
        self.parents.append(parent)
        return self


@dataclass(frozen=True)
class Resource:
    """Plain resource identified by a string."""
    identifier: str

    def get_acl_resource_identifier(self) -> str:
        return self.identifier
