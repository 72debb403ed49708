"""WebIDL AST model: IdlNode, IdlType, Argument and extended attributes.

The analyzer only depends on these dataclasses, so an AST may come from the
bundled lark grammar or be built by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class NodeKind(str, Enum):
    """Tag of an IDL AST node. Values follow the WebIDL construct names."""

    INTERFACE = "interface"
    INTERFACE_MIXIN = "interface mixin"
    DICTIONARY = "dictionary"
    NAMESPACE = "namespace"
    CALLBACK = "callback"
    CALLBACK_INTERFACE = "callback interface"
    ENUM = "enum"
    ENUM_VALUE = "enum-value"
    TYPEDEF = "typedef"
    OPERATION = "operation"
    CONSTRUCTOR = "constructor"
    ATTRIBUTE = "attribute"
    CONST = "const"
    FIELD = "field"
    INCLUDES = "includes"
    IMPLEMENTS = "implements"
    ITERABLE = "iterable"
    ASYNC_ITERABLE = "async iterable"
    MAPLIKE = "maplike"
    SETLIKE = "setlike"


@dataclass(frozen=True)
class ExtendedAttributeValue:
    """Right-hand side of an extended attribute (``[Exposed=(Window,Worker)]``).

    ``kind`` is one of ``identifier``, ``identifier-list``, ``wildcard``,
    ``string`` or ``number``.
    """

    kind: str
    value: str | tuple[str, ...]

    @property
    def names(self) -> tuple[str, ...]:
        if self.kind == "identifier-list":
            return tuple(self.value)
        if self.kind == "wildcard":
            return ("*",)
        return (str(self.value),)

    def to_dict(self) -> dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"type": self.kind, "value": value}


@dataclass(frozen=True)
class ExtendedAttribute:
    name: str
    rhs: ExtendedAttributeValue | None = None
    # None when the attribute has no argument list at all.
    arguments: tuple[Argument, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.rhs is not None:
            data["rhs"] = self.rhs.to_dict()
        if self.arguments is not None:
            data["arguments"] = [a.to_dict() for a in self.arguments]
        return data


@dataclass(frozen=True)
class IdlType:
    """A type expression.

    Plain types only carry ``name``; generic types (``sequence<T>``,
    ``record<K, V>``, ``Promise<T>``...) carry ``generic`` and their
    parameters in ``sub_types``; unions set ``union`` and list their members
    in ``sub_types``.
    """

    name: str = ""
    generic: str = ""
    union: bool = False
    nullable: bool = False
    sub_types: tuple[IdlType, ...] = ()
    ext_attrs: tuple[ExtendedAttribute, ...] = ()

    def leaf_names(self) -> Iterator[str]:
        """Yield the names of the leaf types, recursing through wrappers."""
        if self.union or self.generic:
            for sub in self.sub_types:
                yield from sub.leaf_names()
            return
        if self.name:
            yield self.name

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"nullable": self.nullable}
        if self.union:
            data["union"] = True
            data["idlType"] = [t.to_dict() for t in self.sub_types]
        elif self.generic:
            data["generic"] = self.generic
            data["idlType"] = [t.to_dict() for t in self.sub_types]
        else:
            data["idlType"] = self.name
        if self.ext_attrs:
            data["extAttrs"] = [ea.to_dict() for ea in self.ext_attrs]
        return data

    def __str__(self) -> str:
        if self.union:
            text = "(" + " or ".join(str(t) for t in self.sub_types) + ")"
        elif self.generic:
            text = f"{self.generic}<{', '.join(str(t) for t in self.sub_types)}>"
        else:
            text = self.name
        return text + "?" if self.nullable else text


@dataclass(frozen=True)
class Argument:
    name: str
    idl_type: IdlType
    optional: bool = False
    variadic: bool = False
    default: str | None = None
    ext_attrs: tuple[ExtendedAttribute, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "idlType": self.idl_type.to_dict(),
            "optional": self.optional,
            "variadic": self.variadic,
        }
        if self.default is not None:
            data["default"] = self.default
        if self.ext_attrs:
            data["extAttrs"] = [ea.to_dict() for ea in self.ext_attrs]
        return data


@dataclass(frozen=True)
class IdlNode:
    """A single definition or member of the IDL AST.

    ``kind`` is normally a :class:`NodeKind`; hand-built trees may use any
    string and the analyzer reports kinds it does not know.
    """

    kind: NodeKind | str
    name: str = ""
    partial: bool = False
    inheritance: str | None = None
    members: tuple[IdlNode, ...] = ()
    ext_attrs: tuple[ExtendedAttribute, ...] = ()
    arguments: tuple[Argument, ...] = ()
    idl_type: IdlType | None = None
    # Element types of iterable, async iterable, maplike and setlike.
    type_args: tuple[IdlType, ...] = ()
    special: str = ""  # getter, setter, deleter, stringifier, static
    readonly: bool = False
    required: bool = False
    value: str | None = None  # enum value, const value or field default
    target: str = ""  # includes / implements
    includes: str = ""
    fragment: str = ""

    def ext_attr(self, name: str) -> ExtendedAttribute | None:
        """Return the first extended attribute called *name*, if any."""
        for ea in self.ext_attrs:
            if ea.name == name:
                return ea
        return None

    def has_ext_attr(self, *names: str) -> bool:
        return any(ea.name in names for ea in self.ext_attrs)

    def matching_texts(self) -> tuple[str, ...]:
        """Literal forms under which an enum value may be referenced.

        Prose refers to enum values both quoted and unquoted; the empty
        string only exists in its quoted form.
        """
        text = self.value or ""
        if not text:
            return ('""',)
        return (f'"{text}"', text)

    def to_dict(self) -> dict[str, Any]:
        kind = self.kind.value if isinstance(self.kind, NodeKind) else self.kind
        data: dict[str, Any] = {"type": kind}
        if self.name:
            data["name"] = self.name
        if self.partial:
            data["partial"] = True
        if self.inheritance:
            data["inheritance"] = self.inheritance
        if self.target:
            data["target"] = self.target
            data[kind] = self.includes
        if self.idl_type is not None:
            data["idlType"] = self.idl_type.to_dict()
        if self.type_args:
            data["idlType"] = [t.to_dict() for t in self.type_args]
        if self.arguments:
            data["arguments"] = [a.to_dict() for a in self.arguments]
        if self.special:
            data["special"] = self.special
        if self.readonly:
            data["readonly"] = True
        if self.required:
            data["required"] = True
        if self.value is not None:
            data["value"] = self.value
        if self.members:
            data["members"] = [m.to_dict() for m in self.members]
        if self.ext_attrs:
            data["extAttrs"] = [ea.to_dict() for ea in self.ext_attrs]
        if self.fragment:
            data["fragment"] = self.fragment
        return data
