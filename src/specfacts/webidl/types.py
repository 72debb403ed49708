"""IDL type resolution: turn type expressions into dependencies."""

from __future__ import annotations

from collections.abc import Iterable

from specfacts.model.idl import Argument, IdlType
from specfacts.webidl.builder import ReportBuilder

__all__ = ["WELL_KNOWN_TYPES", "resolve_type", "resolve_arguments"]

# Built-in types that never count as dependencies.
WELL_KNOWN_TYPES = frozenset({
    # scalars
    "undefined",
    "void",
    "any",
    "boolean",
    "byte",
    "octet",
    "short",
    "unsigned short",
    "long",
    "unsigned long",
    "long long",
    "unsigned long long",
    "float",
    "unrestricted float",
    "double",
    "unrestricted double",
    "bigint",
    # strings
    "DOMString",
    "ByteString",
    "USVString",
    "CSSOMString",
    # objects
    "object",
    "symbol",
    "RegExp",
    "Error",
    "DOMException",
    # buffers
    "ArrayBuffer",
    "SharedArrayBuffer",
    "DataView",
    "Int8Array",
    "Int16Array",
    "Int32Array",
    "Uint8Array",
    "Uint16Array",
    "Uint32Array",
    "Uint8ClampedArray",
    "BigInt64Array",
    "BigUint64Array",
    "Float32Array",
    "Float64Array",
    "ArrayBufferView",
    "BufferSource",
    "AllowSharedBufferSource",
    # legacy
    "DOMTimeStamp",
    "Function",
    "VoidFunction",
})


def resolve_type(
    idl_type: IdlType | None,
    owner: str,
    builder: ReportBuilder,
    well_known: frozenset[str] = WELL_KNOWN_TYPES,
) -> None:
    """Add the leaf types of *idl_type* to the dependencies of *owner*."""
    if idl_type is None:
        return
    for name in idl_type.leaf_names():
        builder.mark_window(name)
        if name not in well_known:
            builder.add_dependency(owner, name)


def resolve_arguments(
    arguments: Iterable[Argument],
    owner: str,
    builder: ReportBuilder,
    well_known: frozenset[str] = WELL_KNOWN_TYPES,
) -> None:
    for argument in arguments:
        resolve_type(argument.idl_type, owner, builder, well_known)
