"""
Permission entity: one mask per (requester, resource) pair.
"""

from typing import Dict, Any, Type

from ..mask import MaskBuilderInterface


class Permission:
    """Mutable permission value.

    Bit meaning belongs to the owned mask builder, not to the permission.
    ``persisted`` is set once the engine has written a row for this key.
    """

    def __init__(
        self,
        requester_id: str,
        resource_id: str,
        mask_builder: MaskBuilderInterface,
        persisted: bool = False
    ):
        self.requester_id = requester_id
        self.resource_id = resource_id
        self._mask_builder = mask_builder
        self._persisted = persisted

    @property
    def mask(self) -> int:
        return self._mask_builder.current_mask()

    @property
    def mask_builder(self) -> MaskBuilderInterface:
        return self._mask_builder

    def get_mask(self) -> int:
        return self._mask_builder.current_mask()

    def grant(self, action: str) -> None:
        self._mask_builder.grant_bit(action)

    def revoke(self, action: str) -> None:
        self._mask_builder.revoke_bit(action)

    def is_granted(self, action: str) -> bool:
        return self._mask_builder.is_granted(self.get_mask(), action)

    def is_persistent(self) -> bool:
        return self._persisted

    def set_persistent(self, persisted: bool) -> None:
        self._persisted = bool(persisted)

    def copy(self) -> "Permission":
        """Independent copy with its own mask builder instance."""
        builder = type(self._mask_builder)()
        builder.set_mask(self.get_mask())
        return Permission(self.requester_id, self.resource_id, builder, self._persisted)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for an external cache provider."""
        return {
            "requester": self.requester_id,
            "resource": self.resource_id,
            "mask": self.get_mask(),
            "persisted": self._persisted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], mask_builder_class: Type) -> "Permission":
        builder = mask_builder_class()
        builder.set_mask(int(data["mask"]))
        return cls(
            requester_id=data["requester"],
            resource_id=data["resource"],
            mask_builder=builder,
            persisted=bool(data.get("persisted", False))
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Permission):
            return NotImplemented
        return (
            self.requester_id == other.requester_id
            and self.resource_id == other.resource_id
            and self.get_mask() == other.get_mask()
            and self._persisted == other._persisted
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Permission(requester={self.requester_id!r}, resource={self.resource_id!r}, "
            f"mask={self.get_mask()}, persisted={self._persisted})"
        )
