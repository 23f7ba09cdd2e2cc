"""
Mask builders: map action names to single bits of a permission mask.
"""

import importlib
from typing import ClassVar, Dict, Protocol, Type, Union, runtime_checkable

from shared.errors import ConfigurationError, UnknownActionError


@runtime_checkable
class MaskBuilderInterface(Protocol):
    """Contract every mask builder must satisfy."""

    def bit_for(self, action: str) -> int:
        ...

    def set_mask(self, mask: int) -> None:
        ...

    def current_mask(self) -> int:
        ...

    def grant_bit(self, action: str) -> None:
        ...

    def revoke_bit(self, action: str) -> None:
        ...

    def is_granted(self, mask: int, action: str) -> bool:
        ...


class MaskBuilder:
    """Base mask builder over a fixed action enumeration.

    Subclasses declare ``ACTIONS``; every value must be a distinct single bit.
    An instance carries one working mask, so callers either own their
    instance or reset it with ``set_mask`` before use.
    """

    ACTIONS: ClassVar[Dict[str, int]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        seen = 0
        for action, bit in cls.ACTIONS.items():
            if bit <= 0 or bit & (bit - 1):
                raise ConfigurationError(
                    f'Action "{action}" of {cls.__name__} must map to a single bit',
                    {"builder": cls.__name__, "action": action, "bit": bit}
                )
            if seen & bit:
                raise ConfigurationError(
                    f'Action "{action}" of {cls.__name__} reuses an already assigned bit',
                    {"builder": cls.__name__, "action": action, "bit": bit}
                )
            seen |= bit

    def __init__(self, mask: int = 0):
        self._mask = 0
        self.set_mask(mask)

    def bit_for(self, action: str) -> int:
        try:
            return self.ACTIONS[action]
        except (KeyError, TypeError):
            raise UnknownActionError(action, type(self).__name__) from None

    def set_mask(self, mask: int) -> None:
        if mask < 0:
            raise ValueError("mask must be a non-negative integer")
        self._mask = int(mask)

    def current_mask(self) -> int:
        return self._mask

    def grant_bit(self, action: str) -> None:
        self._mask |= self.bit_for(action)

    def revoke_bit(self, action: str) -> None:
        self._mask &= ~self.bit_for(action)

    def is_granted(self, mask: int, action: str) -> bool:
        bit = self.bit_for(action)
        return mask & bit == bit

    def actions_for(self, mask: int) -> list:
        """Decode a mask into the granted action names, in bit order."""
        return [
            action for action, bit in sorted(self.ACTIONS.items(), key=lambda item: item[1])
            if mask & bit
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mask={self._mask})"


class BasicMaskBuilder(MaskBuilder):
    """view / edit / create / delete."""

    ACTIONS = {
        "view": 1,
        "edit": 2,
        "create": 4,
        "delete": 8,
    }


def resolve_mask_builder(reference: Union[str, Type]) -> Type:
    """Resolve and validate a mask builder class.

    ``reference`` is either the class itself or a dotted import path such as
    ``"service_acl.app.mask.BasicMaskBuilder"``. The class must be
    constructible with no arguments and its instances must satisfy
    ``MaskBuilderInterface``; otherwise ``ConfigurationError`` is raised.
    """
    if isinstance(reference, str):
        module_name, _, class_name = reference.rpartition(".")
        if not module_name:
            raise ConfigurationError(f'Class "{reference}" does not exist', {"action_codec": reference})
        try:
            module = importlib.import_module(module_name)
            builder_class = getattr(module, class_name)
        except (ImportError, AttributeError):
            raise ConfigurationError(f'Class "{reference}" does not exist', {"action_codec": reference}) from None
    else:
        builder_class = reference

    name = getattr(builder_class, "__qualname__", repr(builder_class))
    if not isinstance(builder_class, type):
        raise ConfigurationError(f'"{name}" is not a class', {"action_codec": name})

    try:
        instance = builder_class()
    except TypeError as e:
        raise ConfigurationError(
            f'Class "{name}" must be constructible without arguments',
            {"action_codec": name, "error": str(e)}
        ) from e

    if not isinstance(instance, MaskBuilderInterface):
        raise ConfigurationError(
            f'Class "{name}" must implement MaskBuilderInterface',
            {"action_codec": name}
        )

    return builder_class
