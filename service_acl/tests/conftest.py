"""
Shared fixtures for ACL engine tests.
"""

from typing import Dict, Iterable, List, Optional

import pytest
from prometheus_client import CollectorRegistry
from sqlalchemy import create_engine, select
from sqlalchemy.pool import StaticPool

from shared.metrics import AclMetrics
from service_acl.app.acl import Acl
from service_acl.app.model import Requester, Resource
from service_acl.app.persistence import SqlPermissionStore


class FakeCacheProvider:
    """Dict-backed cache provider recording every call."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.calls: List[tuple] = []

    def get(self, key: str) -> Optional[str]:
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.calls.append(("set", key))
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self.data.pop(key, None)


class NamedParentsRequester:
    """Cascading requester whose parents are looked up by name on demand."""

    def __init__(self, identifier: str, parent_names: Iterable[str], registry: Dict[str, "NamedParentsRequester"]):
        self.identifier = identifier
        self.parent_names = list(parent_names)
        self.registry = registry
        registry[identifier] = self

    def get_acl_requester_identifier(self) -> str:
        return self.identifier

    def get_acl_parent_requesters(self):
        return [self.registry[name] for name in self.parent_names]


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    yield engine
    engine.dispose()


@pytest.fixture
def store(db_engine):
    """Permission store with its table created."""
    permission_store = SqlPermissionStore(db_engine)
    permission_store.create_schema()
    return permission_store


@pytest.fixture
def acl(store):
    """Engine with in-process caching only."""
    return Acl(store)


@pytest.fixture
def cache_provider():
    return FakeCacheProvider()


@pytest.fixture
def metrics():
    return AclMetrics(registry=CollectorRegistry())


@pytest.fixture
def alice():
    return Requester("alice")


@pytest.fixture
def bob():
    return Requester("bob")


@pytest.fixture
def mallory():
    return Requester("mallory")


@pytest.fixture
def foo():
    return Resource("foo")


@pytest.fixture
def bar():
    return Resource("bar")


@pytest.fixture
def requester_registry():
    return {}


@pytest.fixture
def insert_permission(store):
    """Insert a row directly, bypassing the engine."""
    def _insert(requester, resource, mask: int):
        store.insert(
            requester.get_acl_requester_identifier(),
            resource.get_acl_resource_identifier(),
            mask
        )
    return _insert


@pytest.fixture
def find_mask(store):
    """Read the stored mask directly; 0 when no row exists."""
    def _find(requester, resource) -> int:
        with store.engine.connect() as conn:
            row = conn.execute(
                select(store.table.c.mask).where(
                    store.table.c.requester == requester.get_acl_requester_identifier(),
                    store.table.c.resource == resource.get_acl_resource_identifier()
                )
            ).first()
        return int(row[0]) if row else 0
    return _find


@pytest.fixture
def row_exists(store):
    def _exists(requester, resource) -> bool:
        return store.fetch_mask(
            requester.get_acl_requester_identifier(),
            resource.get_acl_resource_identifier()
        ) is not None
    return _exists


@pytest.fixture
def named_requester(requester_registry):
    """Factory for cascading requesters whose parents are referenced by name."""
    def _make(identifier: str, parent_names: Iterable[str] = ()) -> NamedParentsRequester:
        return NamedParentsRequester(identifier, parent_names, requester_registry)
    return _make
