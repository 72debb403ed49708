"""Text transforms that rewrite pre-WebIDL-2 constructs.

Each transform maps IDL text to IDL text; :func:`normalize_idl` applies them
in order.
"""

from __future__ import annotations

import re
from typing import Protocol

__all__ = [
    "IdlTransform",
    "FrozenArrayTransform",
    "SerializerTransform",
    "BUILTIN_TRANSFORMS",
    "normalize_idl",
    "has_obsolete_idl",
]


class IdlTransform(Protocol):
    """A text-to-text rewriting step."""

    def apply(self, idl: str) -> str: ...


class FrozenArrayTransform:
    """Rewrite ``attribute T[]`` array attributes as ``attribute FrozenArray<T>``."""

    _PATTERN = re.compile(r"attribute +([^\[ ]*)\[\]")

    def apply(self, idl: str) -> str:
        return self._PATTERN.sub(r"attribute FrozenArray<\1>", idl)


class SerializerTransform:
    """Replace ``serializer = {...}`` with the default ``toJSON`` operation."""

    _PATTERN = re.compile(r"serializer\s*=\s*{[^}]*}")

    def apply(self, idl: str) -> str:
        return self._PATTERN.sub("[Default] object toJSON()", idl)


BUILTIN_TRANSFORMS: tuple[IdlTransform, ...] = (
    FrozenArrayTransform(),
    SerializerTransform(),
)


def normalize_idl(
    idl: str, custom_transforms: list[IdlTransform] | None = None
) -> str:
    """Apply the built-in transforms (and any custom ones) to *idl*."""
    transforms = list(BUILTIN_TRANSFORMS)
    if custom_transforms:
        transforms.extend(custom_transforms)
    for t in transforms:
        idl = t.apply(idl)
    return idl


def has_obsolete_idl(idl: str) -> bool:
    """Return True when *idl* still uses constructs removed in WebIDL 2."""
    return normalize_idl(idl) != idl
