"""
Mask builder package.

Translates action names ("view", "edit", ...) into single bits of an
integer permission mask and back. The builder used by the engine is chosen
at construction time, either as a class or as a dotted import path, and is
validated once by ``resolve_mask_builder``.
"""

from .builder import BasicMaskBuilder, MaskBuilder, MaskBuilderInterface, resolve_mask_builder

__all__ = [
    "BasicMaskBuilder",
    "MaskBuilder",
    "MaskBuilderInterface",
    "resolve_mask_builder",
]
