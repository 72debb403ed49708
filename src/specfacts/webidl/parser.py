"""Lark Transformer that converts a WebIDL parse tree into IdlNode definitions."""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput

from specfacts.model.idl import (
    Argument,
    ExtendedAttribute,
    ExtendedAttributeValue,
    IdlNode,
    IdlType,
    NodeKind,
)
from specfacts.webidl.errors import IdlSyntaxError

__all__ = ["parse_idl", "IdlTransformer"]

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


def _ident(token: Token) -> str:
    """Identifier value with the escaping underscore removed (``_interface``)."""
    text = str(token)
    return text[1:] if text.startswith("_") else text


def _identifiers(items: list[object]) -> list[str]:
    return [
        _ident(t) for t in items
        if isinstance(t, Token) and t.type == "IDENTIFIER"
    ]


def _token_types(items: list[object]) -> set[str]:
    return {t.type for t in items if isinstance(t, Token)}


def _first(items: list[object], cls: type) -> object | None:
    for item in items:
        if isinstance(item, cls):
            return item
    return None


class _Sentinel:
    """Marker objects returned by transformer rules for the enclosing rule."""


class _Inheritance(_Sentinel):
    def __init__(self, name: str):
        self.name = name


class _ArgumentList(_Sentinel):
    def __init__(self, arguments: tuple[Argument, ...]):
        self.arguments = arguments


class _ExtAttrs(_Sentinel):
    def __init__(self, attrs: tuple[ExtendedAttribute, ...]):
        self.attrs = attrs


class _Literal(_Sentinel):
    def __init__(self, text: str):
        self.text = text


def _arguments(items: list[object]) -> tuple[Argument, ...]:
    found = _first(items, _ArgumentList)
    return found.arguments if isinstance(found, _ArgumentList) else ()


def _ext_attrs(items: list[object]) -> tuple[ExtendedAttribute, ...]:
    found = _first(items, _ExtAttrs)
    return found.attrs if isinstance(found, _ExtAttrs) else ()


def _idl_type(items: list[object]) -> IdlType | None:
    found = _first(items, IdlType)
    return found if isinstance(found, IdlType) else None


def _literal(items: list[object]) -> str | None:
    found = _first(items, _Literal)
    return found.text if isinstance(found, _Literal) else None


def _members(items: list[object]) -> tuple[IdlNode, ...]:
    return tuple(i for i in items if isinstance(i, IdlNode))


class IdlTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into a tuple of top-level IdlNodes.

    The source text is needed to attach the ``fragment`` of each top-level
    definition.
    """

    def __init__(self, source: str):
        super().__init__()
        self._source = source

    # ---- top level ----

    def start(self, items: list[IdlNode]) -> tuple[IdlNode, ...]:
        return tuple(items)

    @v_args(meta=True)
    def definition(self, meta: object, items: list[object]) -> IdlNode:
        node = _members(items)[-1]
        fragment = self._source[meta.start_pos:meta.end_pos]  # type: ignore[attr-defined]
        return replace(node, ext_attrs=_ext_attrs(items), fragment=fragment.strip())

    def _container(self, kind: NodeKind, items: list[object]) -> IdlNode:
        inheritance = _first(items, _Inheritance)
        return IdlNode(
            kind=kind,
            name=_identifiers(items)[0],
            partial="PARTIAL" in _token_types(items),
            inheritance=inheritance.name if isinstance(inheritance, _Inheritance) else None,
            members=_members(items),
        )

    def interface(self, items: list[object]) -> IdlNode:
        return self._container(NodeKind.INTERFACE, items)

    def mixin(self, items: list[object]) -> IdlNode:
        return self._container(NodeKind.INTERFACE_MIXIN, items)

    def callback_interface(self, items: list[object]) -> IdlNode:
        return self._container(NodeKind.CALLBACK_INTERFACE, items)

    def namespace(self, items: list[object]) -> IdlNode:
        return self._container(NodeKind.NAMESPACE, items)

    def dictionary(self, items: list[object]) -> IdlNode:
        return self._container(NodeKind.DICTIONARY, items)

    def callback_function(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.CALLBACK,
            name=_identifiers(items)[0],
            idl_type=_idl_type(items),
            arguments=_arguments(items),
        )

    def enum(self, items: list[object]) -> IdlNode:
        values = tuple(
            IdlNode(kind=NodeKind.ENUM_VALUE, value=str(t)[1:-1])
            for t in items
            if isinstance(t, Token) and t.type == "STRING"
        )
        return IdlNode(kind=NodeKind.ENUM, name=_identifiers(items)[0], members=values)

    def typedef(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.TYPEDEF,
            name=_identifiers(items)[0],
            idl_type=_idl_type(items),
        )

    def includes_statement(self, items: list[Token]) -> IdlNode:
        target, included = _identifiers(items)
        return IdlNode(kind=NodeKind.INCLUDES, target=target, includes=included)

    def implements_statement(self, items: list[Token]) -> IdlNode:
        target, implemented = _identifiers(items)
        return IdlNode(kind=NodeKind.IMPLEMENTS, target=target, includes=implemented)

    def inheritance(self, items: list[Token]) -> _Inheritance:
        return _Inheritance(_ident(items[0]))

    # ---- members ----

    def interface_member(self, items: list[object]) -> IdlNode:
        node = _members(items)[0]
        return replace(node, ext_attrs=_ext_attrs(items))

    def dictionary_member(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.FIELD,
            name=_identifiers(items)[0],
            idl_type=_idl_type(items),
            required="REQUIRED" in _token_types(items),
            value=_literal(items),
            ext_attrs=_ext_attrs(items),
        )

    def const(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.CONST,
            name=_identifiers(items)[0],
            idl_type=_idl_type(items),
            value=_literal(items),
        )

    def attribute(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.ATTRIBUTE,
            name=_identifiers(items)[0],
            idl_type=_idl_type(items),
            readonly="READONLY" in _token_types(items),
        )

    def operation(self, items: list[object]) -> IdlNode:
        names = _identifiers(items)
        return IdlNode(
            kind=NodeKind.OPERATION,
            name=names[0] if names else "",
            idl_type=_idl_type(items),
            arguments=_arguments(items),
        )

    def special_operation(self, items: list[object]) -> IdlNode:
        special = str(items[0])
        return replace(_members(items)[0], special=special)

    def stringifier(self, items: list[object]) -> IdlNode:
        members = _members(items)
        if members:
            return replace(members[0], special="stringifier")
        return IdlNode(kind=NodeKind.OPERATION, special="stringifier")

    def static_member(self, items: list[object]) -> IdlNode:
        return replace(_members(items)[0], special="static")

    def constructor(self, items: list[object]) -> IdlNode:
        return IdlNode(kind=NodeKind.CONSTRUCTOR, arguments=_arguments(items))

    def iterable(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.ITERABLE,
            type_args=tuple(i for i in items if isinstance(i, IdlType)),
        )

    def async_iterable(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.ASYNC_ITERABLE,
            type_args=tuple(i for i in items if isinstance(i, IdlType)),
            arguments=_arguments(items),
        )

    def maplike(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.MAPLIKE,
            type_args=tuple(i for i in items if isinstance(i, IdlType)),
            readonly="READONLY" in _token_types(items),
        )

    def setlike(self, items: list[object]) -> IdlNode:
        return IdlNode(
            kind=NodeKind.SETLIKE,
            type_args=tuple(i for i in items if isinstance(i, IdlType)),
            readonly="READONLY" in _token_types(items),
        )

    # ---- arguments and values ----

    def argument_list(self, items: list[Argument]) -> _ArgumentList:
        return _ArgumentList(tuple(items))

    def argument(self, items: list[object]) -> Argument:
        types = _token_types(items)
        return Argument(
            name=_identifiers(items)[0],
            idl_type=_idl_type(items),  # type: ignore[arg-type]
            optional="OPTIONAL" in types,
            variadic="ELLIPSIS" in types,
            default=_literal(items),
            ext_attrs=_ext_attrs(items),
        )

    def default_value(self, items: list[object]) -> _Literal:
        if len(items) == 1 and isinstance(items[0], _Literal):
            return items[0]
        return _Literal("".join(str(i) for i in items))

    def const_value(self, items: list[Token]) -> _Literal:
        return _Literal(str(items[0]))

    # ---- types ----

    def type_with_ext_attrs(self, items: list[object]) -> IdlType:
        idl_type = _idl_type(items)
        attrs = _ext_attrs(items)
        if attrs:
            return replace(idl_type, ext_attrs=attrs)  # type: ignore[type-var]
        return idl_type  # type: ignore[return-value]

    def idl_type(self, items: list[object]) -> IdlType:
        idl_type = _idl_type(items)
        if "QMARK" in _token_types(items):
            return replace(idl_type, nullable=True)  # type: ignore[type-var]
        return idl_type  # type: ignore[return-value]

    def named_type(self, items: list[Token]) -> IdlType:
        return IdlType(name=_ident(items[0]))

    def generic_type(self, items: list[object]) -> IdlType:
        return IdlType(
            generic=_identifiers(items)[0],
            sub_types=tuple(i for i in items if isinstance(i, IdlType)),
        )

    def primitive_type(self, items: list[Token]) -> IdlType:
        return IdlType(name=" ".join(str(t) for t in items))

    def union_type(self, items: list[IdlType]) -> IdlType:
        return IdlType(union=True, sub_types=tuple(items))

    # ---- extended attributes ----

    def ext_attr_list(self, items: list[ExtendedAttribute]) -> _ExtAttrs:
        return _ExtAttrs(tuple(items))

    def ext_attr_no_args(self, items: list[Token]) -> ExtendedAttribute:
        return ExtendedAttribute(name=str(items[0]))

    def ext_attr_arg_list(self, items: list[object]) -> ExtendedAttribute:
        return ExtendedAttribute(name=str(items[0]), arguments=_arguments(items))

    def ext_attr_named_arg_list(self, items: list[object]) -> ExtendedAttribute:
        return ExtendedAttribute(
            name=str(items[0]),
            rhs=ExtendedAttributeValue(kind="identifier", value=_ident(items[1])),  # type: ignore[arg-type]
            arguments=_arguments(items),
        )

    def ext_attr_assign(self, items: list[object]) -> ExtendedAttribute:
        return ExtendedAttribute(name=str(items[0]), rhs=items[1])  # type: ignore[arg-type]

    def rhs_identifier(self, items: list[Token]) -> ExtendedAttributeValue:
        return ExtendedAttributeValue(kind="identifier", value=_ident(items[0]))

    def rhs_identifier_list(self, items: list[Token]) -> ExtendedAttributeValue:
        return ExtendedAttributeValue(
            kind="identifier-list", value=tuple(_ident(t) for t in items)
        )

    def rhs_wildcard(self, items: list[Token]) -> ExtendedAttributeValue:
        return ExtendedAttributeValue(kind="wildcard", value="*")

    def rhs_string(self, items: list[Token]) -> ExtendedAttributeValue:
        return ExtendedAttributeValue(kind="string", value=str(items[0])[1:-1])

    def rhs_number(self, items: list[Token]) -> ExtendedAttributeValue:
        return ExtendedAttributeValue(kind="number", value=str(items[0]))


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(
        GRAMMAR_PATH.read_text(),
        parser="lalr",
        start="start",
        propagate_positions=True,
    )


def parse_idl(text: str) -> tuple[IdlNode, ...]:
    """Parse WebIDL text into its top-level definitions, in source order."""
    try:
        tree = _parser().parse(text)
    except UnexpectedInput as e:
        # Lark reports -1 (or "?") when the error is at end of input.
        line = e.line if isinstance(e.line, int) and e.line > 0 else None
        column = e.column if isinstance(e.column, int) and e.column > 0 else None
        pos = getattr(e, "pos_in_stream", None)
        snippet = e.get_context(text) if isinstance(pos, int) and pos >= 0 else ""
        raise IdlSyntaxError(
            f"Invalid WebIDL at line {line}, column {column}: {e}",
            line=line,
            column=column,
            snippet=snippet,
        ) from e
    definitions = IdlTransformer(text).transform(tree)
    logger.debug("Parsed %d WebIDL definitions", len(definitions))
    return definitions
