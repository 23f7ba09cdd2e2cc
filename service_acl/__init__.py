"""
ACL engine package.

Decides whether a requester may perform a named action on a resource and
lets callers grant or revoke actions. Permissions are stored as bitmasks,
one bit per action, in a SQL table and mirrored in a two-tier cache.

- app.acl: the ``Acl`` engine (grant, revoke, is_granted).
- app.mask: action-name-to-bit mask builders.
- app.model: requester/resource capabilities and the Permission entity.
- app.cache: in-process and provider-backed permission caches.
- app.persistence: the SQL backing store.
- app.factory: builds an engine from ``AclSettings``.
- cli: ``acl-admin`` command line.
"""
