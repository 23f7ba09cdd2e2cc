"""
SQL persistence layer for permission masks.
"""

from typing import Optional, Protocol, Union

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    func,
    select,
    text,
)
from sqlalchemy.engine import Engine

from shared.logging import get_logger
from shared.metrics import AclMetrics

DEFAULT_PERMISSIONS_TABLE = "acl_permissions"


class PermissionStore(Protocol):
    """Backing store of (requester, resource) -> mask rows."""

    def fetch_mask(self, requester_id: str, resource_id: str) -> Optional[int]:
        ...

    def insert(self, requester_id: str, resource_id: str, mask: int) -> None:
        ...

    def update(self, requester_id: str, resource_id: str, mask: int) -> int:
        ...  # number of rows changed

    def delete(self, requester_id: str, resource_id: str) -> None:
        ...


class SqlPermissionStore:
    """Permission table accessed through SQLAlchemy Core.

    Database errors propagate unchanged; the engine adds no retry logic.
    """

    def __init__(
        self,
        engine: Union[Engine, str],
        table_name: str = DEFAULT_PERMISSIONS_TABLE,
        metrics: Optional[AclMetrics] = None
    ):
        self.engine = create_engine(engine) if isinstance(engine, str) else engine
        self.table_name = table_name
        self.metrics = metrics
        self.logger = get_logger("acl.persistence.sql")

        self.metadata = MetaData()
        self.table = Table(
            table_name,
            self.metadata,
            Column("requester", String(255), nullable=False),
            Column("resource", String(255), nullable=False),
            Column("mask", Integer, nullable=False),
            UniqueConstraint("requester", "resource", name=f"uq_{table_name}_requester_resource"),
        )

    def create_schema(self) -> None:
        """Create the permissions table if it does not exist."""
        self.metadata.create_all(self.engine, checkfirst=True)
        self.logger.info("Permissions table ready", table=self.table_name)

    def fetch_mask(self, requester_id: str, resource_id: str) -> Optional[int]:
        self._record("fetch")
        with self.engine.connect() as conn:
            row = conn.execute(
                select(self.table.c.mask).where(
                    self.table.c.requester == requester_id,
                    self.table.c.resource == resource_id
                )
            ).first()

        if row is None:
            return None
        return int(row[0])

    def insert(self, requester_id: str, resource_id: str, mask: int) -> None:
        self._record("insert")
        with self.engine.begin() as conn:
            conn.execute(
                self.table.insert().values(requester=requester_id, resource=resource_id, mask=mask)
            )
        self.logger.info("Permission row inserted", requester=requester_id, resource=resource_id, mask=mask)

    def update(self, requester_id: str, resource_id: str, mask: int) -> int:
        """Set the mask of an existing row. Returns the number of rows changed."""
        self._record("update")
        with self.engine.begin() as conn:
            result = conn.execute(
                self.table.update()
                .where(self.table.c.requester == requester_id, self.table.c.resource == resource_id)
                .values(mask=mask)
            )

        if not result.rowcount:
            self.logger.warning("Permission row not found for update", requester=requester_id, resource=resource_id)
            return 0

        self.logger.info("Permission row updated", requester=requester_id, resource=resource_id, mask=mask)
        return result.rowcount

    def delete(self, requester_id: str, resource_id: str) -> None:
        self._record("delete")
        with self.engine.begin() as conn:
            result = conn.execute(
                self.table.delete().where(
                    self.table.c.requester == requester_id,
                    self.table.c.resource == resource_id
                )
            )

        if result.rowcount:
            self.logger.info("Permission row deleted", requester=requester_id, resource=resource_id)
        else:
            self.logger.warning("Permission row not found for deletion", requester=requester_id, resource=resource_id)

    def count(self) -> int:
        """Total number of permission rows."""
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(self.table)).scalar() or 0

    def health_check(self) -> bool:
        """Check database health."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            self.logger.warning("Database health check failed", error=str(e))
            return False

    def _record(self, operation: str) -> None:
        if self.metrics:
            self.metrics.record_store_operation(operation)
