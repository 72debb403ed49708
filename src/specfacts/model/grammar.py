"""CSS value grammar model: tokens and the grammar tree produced by the parser.

Every node is a frozen dataclass carrying an ``optional`` flag (set by the
``?`` multiplier on a single component). ``to_dict`` produces the JSON shape
of extracted grammars, e.g. ``{"type": "keyword", "name": "auto"}`` or
``{"oneOf": [...]}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class TokenKind(Enum):
    """Kinds of lexemes produced by the grammar tokenizer."""

    COMBINATOR = "combinator"
    BRACKET_OPEN = "bracket-open"
    BRACKET_CLOSE = "bracket-close"
    STRING = "string"
    TYPE_REF = "type-ref"
    PROPERTY_REF = "property-ref"
    KEYWORD = "keyword"
    FUNCTION_START = "function-start"
    PAREN_OPEN = "paren-open"
    PAREN_CLOSE = "paren-close"
    MULTIPLIER_RANGE = "multiplier-range"
    MULTIPLIER = "multiplier"
    COMMA = "comma"
    SLASH = "slash"


@dataclass(frozen=True)
class Token:
    """A single lexeme.

    ``text`` is the token payload: the symbol for combinators and
    multipliers, the bare name for keywords, functions and references, the
    unquoted content for strings and the verbatim ``{...}`` for ranges.
    """

    kind: TokenKind
    text: str
    position: int = 0


def _with_optional(data: dict[str, Any], node: GrammarNode) -> dict[str, Any]:
    if node.optional:
        data["optional"] = True
    return data


@dataclass(frozen=True)
class Keyword:
    name: str
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"type": "keyword", "name": self.name}, self)


@dataclass(frozen=True)
class Primitive:
    """A basic CSS data type such as ``<integer>`` or ``<length-percentage>``."""

    name: str
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"type": "primitive", "name": self.name}, self)


@dataclass(frozen=True)
class ValueSpace:
    """A reference to a named production defined elsewhere (``<color-stop>``)."""

    name: str
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"type": "valuespace", "name": self.name}, self)


@dataclass(frozen=True)
class PropertyRef:
    """A reference to the grammar of another property (``<'grid-area'>``)."""

    name: str
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"type": "propertyref", "name": self.name}, self)


@dataclass(frozen=True)
class StringLiteral:
    text: str
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"type": "string", "content": self.text}, self)


@dataclass(frozen=True)
class Function:
    """A functional notation such as ``rgb( <number>{3} )``."""

    name: str
    arguments: GrammarNode
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = {
            "type": "function",
            "name": self.name,
            "arguments": self.arguments.to_dict(),
        }
        return _with_optional(data, self)


@dataclass(frozen=True)
class Sequence:
    """Ordered juxtaposition of components, or a repetition of one component.

    A repetition produced by a multiplier has exactly one item and carries the
    bounds (``None`` means unbounded) and the separator, if any.
    """

    items: tuple[GrammarNode, ...]
    min_items: int | None = None
    max_items: int | None = None
    separator: str | None = None
    optional: bool = False

    @property
    def is_repetition(self) -> bool:
        return (
            self.min_items is not None
            or self.max_items is not None
            or self.separator is not None
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "array",
            "items": [item.to_dict() for item in self.items],
        }
        if self.min_items is not None:
            data["minItems"] = self.min_items
        if self.max_items is not None:
            data["maxItems"] = self.max_items
        if self.separator is not None:
            data["separator"] = self.separator
        return _with_optional(data, self)


@dataclass(frozen=True)
class AllOf:
    """``a && b``: all components, in any order."""

    items: tuple[GrammarNode, ...]
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"allOf": [i.to_dict() for i in self.items]}, self)


@dataclass(frozen=True)
class AnyOf:
    """``a || b``: one or more of the components, in any order."""

    items: tuple[GrammarNode, ...]
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"anyOf": [i.to_dict() for i in self.items]}, self)


@dataclass(frozen=True)
class OneOf:
    """``a | b``: exactly one of the components."""

    items: tuple[GrammarNode, ...]
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _with_optional({"oneOf": [i.to_dict() for i in self.items]}, self)


GrammarNode = Union[
    Keyword,
    Primitive,
    ValueSpace,
    PropertyRef,
    StringLiteral,
    Function,
    Sequence,
    AllOf,
    AnyOf,
    OneOf,
]
