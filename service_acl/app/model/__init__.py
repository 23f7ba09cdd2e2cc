"""
Model package.

- identity: requester / cascading requester / resource capabilities and
  plain dataclass implementations.
- permission: the Permission entity pairing a key with a mask.
"""

from .identity import (
    AclCascadingRequester,
    AclRequester,
    AclResource,
    CascadingRequester,
    Requester,
    Resource,
)
from .permission import Permission

__all__ = [
    "AclCascadingRequester",
    "AclRequester",
    "AclResource",
    "CascadingRequester",
    "Permission",
    "Requester",
    "Resource",
]
