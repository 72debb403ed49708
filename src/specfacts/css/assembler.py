"""Grammar assembler: turn the classified token stream into a grammar tree.

Resolution runs in four steps over a flat list of grammar leaves and marker
tokens:

1. multipliers that follow a leaf are applied to it (those following ``]``
   or ``)`` stay in the stream until their group is built);
2. functional notations are matched, innermost first;
3. bracket groups are matched, innermost first, and their multipliers
   applied;
4. the remaining list is split by combinator, loosest first, so that
   juxtaposition binds tighter than ``&&``, which binds tighter than ``||``,
   which binds tighter than ``|``.
"""

from __future__ import annotations

import re
from dataclasses import replace

from specfacts.css.errors import (
    InvalidMultiplier,
    MalformedMultiplier,
    UnrecognizedToken,
    UnterminatedBracketGroup,
    UnterminatedCombinator,
    UnterminatedFunction,
)
from specfacts.css.terminals import Item
from specfacts.model.grammar import (
    AllOf,
    AnyOf,
    Function,
    GrammarNode,
    OneOf,
    Sequence,
    StringLiteral,
    Token,
    TokenKind,
)

__all__ = ["assemble", "attach_multipliers", "apply_multiplier"]

# Loosest first.
_COMBINATORS = ("|", "||", "&&")

_VARIANTS = {
    "|": OneOf,
    "||": AnyOf,
    "&&": AllOf,
}

_RANGE_RE = re.compile(r"^\{\s*(\d+)\s*(?:(,)\s*(\d+|∞)?\s*)?\}$")


def _is_marker(item: Item, *kinds: TokenKind) -> bool:
    return isinstance(item, Token) and (not kinds or item.kind in kinds)


def _is_multiplier(item: Item) -> bool:
    return _is_marker(item, TokenKind.MULTIPLIER, TokenKind.MULTIPLIER_RANGE)


def _take_multipliers(items: list[Item], start: int) -> list[Token]:
    end = start
    while end < len(items) and _is_multiplier(items[end]):
        end += 1
    return items[start:end]  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Multipliers
# ---------------------------------------------------------------------------


def _parse_range(multiplier: Token, source: str) -> tuple[int, int | None]:
    """Parse ``{m}``, ``{m,}`` or ``{m,n}`` into (min, max)."""
    m = _RANGE_RE.match(multiplier.text)
    if not m:
        raise MalformedMultiplier(
            f"Unrecognized range format in multiplier {multiplier.text!r} in {source!r}",
            fragment=multiplier.text,
            source=source,
        )
    low = int(m.group(1))
    if not m.group(2):
        return low, low
    if m.group(3) is None or m.group(3) == "∞":
        return low, None
    high = int(m.group(3))
    if high < low:
        raise MalformedMultiplier(
            f"Multiplier range {multiplier.text!r} has max below min in {source!r}",
            fragment=multiplier.text,
            source=source,
        )
    return low, high


def apply_multiplier(
    multiplier: Token, node: GrammarNode, group: bool, source: str = ""
) -> GrammarNode:
    """Apply a single multiplier to *node*.

    *group* tells whether *node* is a freshly closed bracket group, which
    changes the meaning of ``?`` and ``!``.
    """
    if multiplier.kind is TokenKind.MULTIPLIER_RANGE:
        low, high = _parse_range(multiplier, source)
        return Sequence(items=(node,), min_items=low, max_items=high)

    symbol = multiplier.text
    if symbol == "*":
        return Sequence(items=(node,), min_items=0)
    if symbol == "+":
        return Sequence(items=(node,), min_items=1)
    if symbol == "#":
        return Sequence(items=(node,), separator=",")
    if symbol == "?":
        if group:
            return Sequence(items=(node,), max_items=1)
        return replace(node, optional=True)
    if symbol == "!":
        if group:
            return Sequence(items=(node,), min_items=1)
        raise InvalidMultiplier(
            f"Multiplier '!' applied to non-group {node!r} in {source!r}",
            fragment=symbol,
            source=source,
        )
    raise MalformedMultiplier(
        f"Unrecognized multiplier {symbol!r} in {source!r}",
        fragment=symbol,
        source=source,
    )


def _apply_chain(
    node: GrammarNode, multipliers: list[Token], group: bool, source: str
) -> GrammarNode:
    previous: Token | None = None
    for multiplier in multipliers:
        if (
            previous is not None
            and previous.text == "#"
            and multiplier.kind is TokenKind.MULTIPLIER_RANGE
            and isinstance(node, Sequence)
        ):
            # "#{1,4}": one to four comma-separated occurrences.
            low, high = _parse_range(multiplier, source)
            node = replace(node, min_items=low, max_items=high)
        else:
            node = apply_multiplier(
                multiplier, node, group=group and previous is None, source=source
            )
        previous = multiplier
    return node


def attach_multipliers(items: list[Item], source: str = "") -> list[Item]:
    """Apply multipliers that directly follow a grammar leaf, left to right."""
    result: list[Item] = []
    i = 0
    while i < len(items):
        item = items[i]
        multipliers = _take_multipliers(items, i + 1)
        if _is_multiplier(item):
            raise MalformedMultiplier(
                f"Multiplier {item.text!r} at position {item.position} "  # type: ignore[union-attr]
                f"does not follow anything it can modify in {source!r}",
                fragment=item.text,  # type: ignore[union-attr]
                source=source,
            )
        if multipliers and not isinstance(item, Token):
            result.append(_apply_chain(item, multipliers, group=False, source=source))
        else:
            if multipliers and not _is_marker(
                item, TokenKind.BRACKET_CLOSE, TokenKind.PAREN_CLOSE
            ):
                raise MalformedMultiplier(
                    f"Multiplier {multipliers[0].text!r} follows {item.text!r} "  # type: ignore[union-attr]
                    f"in {source!r}",
                    fragment=multipliers[0].text,
                    source=source,
                )
            result.append(item)
            result.extend(multipliers)
        i += 1 + len(multipliers)
    return result


# ---------------------------------------------------------------------------
# Functions and bracket groups
# ---------------------------------------------------------------------------


def _resolve_functions(items: list[Item], source: str) -> list[Item]:
    while True:
        starts = [
            i for i, item in enumerate(items)
            if _is_marker(item, TokenKind.FUNCTION_START)
        ]
        if not starts:
            return items
        start = starts[-1]
        depth = 0
        close = None
        for k in range(start + 1, len(items)):
            if _is_marker(items[k], TokenKind.PAREN_OPEN):
                depth += 1
            elif _is_marker(items[k], TokenKind.PAREN_CLOSE):
                if depth == 0:
                    close = k
                    break
                depth -= 1
        name = items[start].text  # type: ignore[union-attr]
        if close is None:
            raise UnterminatedFunction(
                f"Unterminated function {name}( in {source!r}",
                fragment=f"{name}(",
                source=source,
            )
        span = items[start + 1:close]
        arguments = assemble(span, source) if span else Sequence(items=())
        node: GrammarNode = Function(name=name, arguments=arguments)
        multipliers = _take_multipliers(items, close + 1)
        if multipliers:
            node = _apply_chain(node, multipliers, group=False, source=source)
        items = items[:start] + [node] + items[close + 1 + len(multipliers):]


def _release_parens(items: list[Item], source: str) -> list[Item]:
    """Turn parentheses that do not belong to a function into literals."""
    result: list[Item] = []
    i = 0
    while i < len(items):
        item = items[i]
        if _is_marker(item, TokenKind.PAREN_OPEN, TokenKind.PAREN_CLOSE):
            multipliers = _take_multipliers(items, i + 1)
            node: GrammarNode = StringLiteral(text=item.text)  # type: ignore[union-attr]
            if multipliers:
                node = _apply_chain(node, multipliers, group=False, source=source)
            result.append(node)
            i += 1 + len(multipliers)
        else:
            result.append(item)
            i += 1
    return result


def _resolve_brackets(items: list[Item], source: str) -> list[Item]:
    while True:
        opens = [
            i for i, item in enumerate(items)
            if _is_marker(item, TokenKind.BRACKET_OPEN)
        ]
        if not opens:
            for item in items:
                if _is_marker(item, TokenKind.BRACKET_CLOSE):
                    raise UnterminatedBracketGroup(
                        f"Unexpected closing bracket in {source!r}",
                        fragment="]",
                        source=source,
                    )
            return items
        start = opens[-1]
        close = next(
            (
                k for k in range(start + 1, len(items))
                if _is_marker(items[k], TokenKind.BRACKET_CLOSE)
            ),
            None,
        )
        if close is None:
            raise UnterminatedBracketGroup(
                f"Unterminated bracket-group in {source!r}",
                fragment="[",
                source=source,
            )
        span = items[start + 1:close]
        if not span:
            raise UnrecognizedToken(
                f"Empty bracket-group in {source!r}", fragment="[ ]", source=source
            )
        node = _resolve_combinators(span, source)
        multipliers = _take_multipliers(items, close + 1)
        if multipliers:
            node = _apply_chain(node, multipliers, group=True, source=source)
        items = items[:start] + [node] + items[close + 1 + len(multipliers):]


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def _split(items: list[Item], symbol: str) -> list[list[Item]]:
    segments: list[list[Item]] = [[]]
    for item in items:
        if _is_marker(item, TokenKind.COMBINATOR) and item.text == symbol:  # type: ignore[union-attr]
            segments.append([])
        else:
            segments[-1].append(item)
    return segments


def _resolve_combinators(
    items: list[Item], source: str, combinators: tuple[str, ...] = _COMBINATORS
) -> GrammarNode:
    for index, symbol in enumerate(combinators):
        if not any(
            _is_marker(item, TokenKind.COMBINATOR) and item.text == symbol  # type: ignore[union-attr]
            for item in items
        ):
            continue
        segments = _split(items, symbol)
        if any(not segment for segment in segments):
            raise UnterminatedCombinator(
                f"Combinator {symbol!r} is missing an operand in {source!r}",
                fragment=symbol,
                source=source,
            )
        variant = _VARIANTS[symbol]
        lower = combinators[index + 1:]
        return variant(
            items=tuple(_resolve_combinators(s, source, lower) for s in segments)
        )

    for item in items:
        if isinstance(item, Token):
            raise UnrecognizedToken(
                f"Unexpected {item.text!r} at position {item.position} in {source!r}",
                fragment=item.text,
                source=source,
            )
    if not items:
        raise UnrecognizedToken(f"Empty grammar in {source!r}", source=source)
    if len(items) == 1:
        return items[0]  # type: ignore[return-value]
    return Sequence(items=tuple(items))  # type: ignore[arg-type]


def assemble(items: list[Item], source: str = "") -> GrammarNode:
    """Resolve functions, bracket groups and combinators into one tree.

    Multipliers on leaves must already be attached (see
    :func:`attach_multipliers`).
    """
    items = _resolve_functions(items, source)
    items = _release_parens(items, source)
    items = _resolve_brackets(items, source)
    return _resolve_combinators(items, source)
