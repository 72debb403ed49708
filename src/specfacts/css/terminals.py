"""Terminal classification: map raw tokens to grammar leaves or markers."""

from __future__ import annotations

import re
from typing import Union

from specfacts.css.errors import UnrecognizedToken
from specfacts.model.grammar import (
    GrammarNode,
    Keyword,
    Primitive,
    PropertyRef,
    StringLiteral,
    Token,
    TokenKind,
    ValueSpace,
)

__all__ = ["PRIMITIVES", "classify", "Item"]

# Basic data types of css-values and friends, plus the token-level atoms
# used by selector and media query grammars.
PRIMITIVES = frozenset({
    "integer",
    "number",
    "percentage",
    "length",
    "angle",
    "time",
    "frequency",
    "resolution",
    "color",
    "image",
    "position",
    "length-percentage",
    "angle-percentage",
    "time-percentage",
    "frequency-percentage",
    "dimension",
    "string",
    "url",
    "custom-ident",
    "ident",
    "ident-token",
    "function-token",
    "hash-token",
    "string-token",
    "number-token",
    "dimension-token",
    "percentage-token",
    "delim-token",
    "any-value",
    "declaration-value",
})

# Tokens that survive classification as structural markers.
_MARKER_KINDS = frozenset({
    TokenKind.COMBINATOR,
    TokenKind.BRACKET_OPEN,
    TokenKind.BRACKET_CLOSE,
    TokenKind.FUNCTION_START,
    TokenKind.PAREN_OPEN,
    TokenKind.PAREN_CLOSE,
    TokenKind.MULTIPLIER,
    TokenKind.MULTIPLIER_RANGE,
})

# Range restriction inside a type reference: <length [0,inf]>
_RANGE_RE = re.compile(r"\s*\[[^\]]*\]\s*$")
_KEYWORD_RE = re.compile(r"^[-_a-zA-Z]")

# What the assembler works on: grammar nodes interleaved with marker tokens.
Item = Union[GrammarNode, Token]


def classify(
    token: Token, source: str = "", primitives: frozenset[str] = PRIMITIVES
) -> Item:
    """Turn *token* into a grammar leaf, or return it unchanged if structural."""
    kind = token.kind
    if kind in _MARKER_KINDS:
        return token
    if kind in (TokenKind.SLASH, TokenKind.COMMA, TokenKind.STRING):
        return StringLiteral(text=token.text)
    if kind is TokenKind.PROPERTY_REF:
        return PropertyRef(name=token.text)
    if kind is TokenKind.TYPE_REF:
        name = _RANGE_RE.sub("", token.text)
        if name in primitives:
            return Primitive(name=name)
        return ValueSpace(name=name)
    if kind is TokenKind.KEYWORD and _KEYWORD_RE.match(token.text):
        return Keyword(name=token.text)
    raise UnrecognizedToken(
        f"Unrecognized token {token.text!r} at position {token.position} in {source!r}",
        fragment=token.text,
        source=source,
    )
