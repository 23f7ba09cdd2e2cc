"""
Persistence package.

The backing store is the sole source of truth for permission masks: one
row per (requester, resource) with a uniqueness constraint on the pair.
``SqlPermissionStore`` implements it on any SQLAlchemy-supported database.
"""

from .sql import DEFAULT_PERMISSIONS_TABLE, PermissionStore, SqlPermissionStore

__all__ = [
    "DEFAULT_PERMISSIONS_TABLE",
    "PermissionStore",
    "SqlPermissionStore",
]
