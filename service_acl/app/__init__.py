"""
ACL engine application package.

Public surface:

- Acl: grant / revoke / is_granted over a store and a two-tier cache.
- create_acl: build an engine from AclSettings.
- Requester, CascadingRequester, Resource: plain identity objects.
- BasicMaskBuilder: view=1, edit=2, create=4, delete=8.

Guidelines:
- The SQL table is the only source of truth; caches are advisory.
- A zero mask is never stored; the row is deleted instead.
"""

from .acl import Acl
from .factory import create_acl
from .mask import BasicMaskBuilder, MaskBuilder
from .model import CascadingRequester, Permission, Requester, Resource

__all__ = [
    "Acl",
    "BasicMaskBuilder",
    "CascadingRequester",
    "MaskBuilder",
    "Permission",
    "Requester",
    "Resource",
    "create_acl",
]
