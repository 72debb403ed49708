"""Character-level tokenizer for CSS value definition syntax.

The tokenizer is a small state machine. Whitespace separates tokens except
inside quoted strings, type references (``<length [0,inf]>``) and multiplier
ranges (``{1,4}``). Multipliers following a ``]`` are emitted as separate
tokens; attaching them to what they modify is left to the assembler.
"""

from __future__ import annotations

from specfacts.css.errors import (
    UnexpectedCharacter,
    UnterminatedCombinator,
    UnterminatedToken,
)
from specfacts.model.grammar import Token, TokenKind

__all__ = ["tokenize"]

# Characters that form a token on their own when met at a token boundary.
_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "[": TokenKind.BRACKET_OPEN,
    "]": TokenKind.BRACKET_CLOSE,
    "+": TokenKind.MULTIPLIER,
    "*": TokenKind.MULTIPLIER,
    "#": TokenKind.MULTIPLIER,
    "!": TokenKind.MULTIPLIER,
    "?": TokenKind.MULTIPLIER,
    "/": TokenKind.SLASH,
    ",": TokenKind.COMMA,
    "(": TokenKind.PAREN_OPEN,
    ")": TokenKind.PAREN_CLOSE,
}

# Characters that end a bare keyword and are then read as a new token.
_KEYWORD_TERMINATORS = frozenset("[]+*#!?/,){}&|'")

_UNTERMINATED_STATES = frozenset({
    "quote",
    "type-ref-open",
    "type-ref-quote",
    "type-ref-close",
    "curly",
})


class _Tokenizer:
    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens: list[Token] = []
        self.state = "new"
        self.buffer = ""
        self.start = 0

    # ---- helpers ----

    def _emit(self, kind: TokenKind, text: str, position: int | None = None) -> None:
        pos = self.start if position is None else position
        self.tokens.append(Token(kind=kind, text=text, position=pos))
        self.state = "new"
        self.buffer = ""

    def _begin(self, state: str, position: int, buffer: str = "") -> None:
        self.state = state
        self.start = position
        self.buffer = buffer

    def _unexpected(self, char: str, position: int) -> UnexpectedCharacter:
        return UnexpectedCharacter(
            f"Unexpected character {char!r} at position {position} "
            f"(state {self.state}) in {self.source!r}",
            fragment=char,
            source=self.source,
            state=self.state,
        )

    # ---- main loop ----

    def run(self) -> list[Token]:
        i = 0
        while i < len(self.source):
            char = self.source[i]
            if self._step(char, i):
                i += 1
        self._finish()
        return self.tokens

    def _step(self, char: str, i: int) -> bool:
        """Consume *char* in the current state.

        Returns False when the character must be read again in the new state.
        """
        state = self.state

        if state == "new":
            if char.isspace():
                return True
            if char == "<":
                self._begin("type-ref-open", i)
            elif char == "'":
                self._begin("quote", i)
            elif char == "{":
                self._begin("curly", i, "{")
            elif char == "&":
                self._begin("ampersand", i)
            elif char == "|":
                self._begin("pipe", i)
            elif char in _SINGLE_CHAR_TOKENS:
                self._emit(_SINGLE_CHAR_TOKENS[char], char, i)
            elif char in "<>}":
                raise self._unexpected(char, i)
            else:
                self._begin("keyword", i, char)
            return True

        if state == "keyword":
            if char.isspace():
                self._emit(TokenKind.KEYWORD, self.buffer)
                return True
            if char == "(":
                self._emit(TokenKind.FUNCTION_START, self.buffer)
                return True
            if char in "<>":
                raise self._unexpected(char, i)
            if char in _KEYWORD_TERMINATORS:
                self._emit(TokenKind.KEYWORD, self.buffer)
                return False
            self.buffer += char
            return True

        if state == "quote":
            if char == "'":
                self._emit(TokenKind.STRING, self.buffer)
            else:
                self.buffer += char
            return True

        if state == "type-ref-open":
            if char == "'" and not self.buffer:
                self.state = "type-ref-quote"
            elif char == ">":
                if not self.buffer.strip():
                    raise self._unexpected(char, i)
                self._emit(TokenKind.TYPE_REF, self.buffer.strip())
            elif char in "<'":
                raise self._unexpected(char, i)
            else:
                self.buffer += char
            return True

        if state == "type-ref-quote":
            if char == "'":
                self.state = "type-ref-close"
            else:
                self.buffer += char
            return True

        if state == "type-ref-close":
            if char != ">":
                raise self._unexpected(char, i)
            self._emit(TokenKind.PROPERTY_REF, self.buffer)
            return True

        if state == "curly":
            if char == "{":
                raise self._unexpected(char, i)
            self.buffer += char
            if char == "}":
                self._emit(TokenKind.MULTIPLIER_RANGE, self.buffer)
            return True

        if state == "ampersand":
            if char != "&":
                raise self._unexpected(char, i)
            self._emit(TokenKind.COMBINATOR, "&&")
            return True

        if state == "pipe":
            if char == "|":
                self._emit(TokenKind.COMBINATOR, "||")
                return True
            self._emit(TokenKind.COMBINATOR, "|")
            return False

        raise AssertionError(f"unknown tokenizer state {state!r}")  # pragma: no cover

    def _finish(self) -> None:
        if self.state == "keyword":
            self._emit(TokenKind.KEYWORD, self.buffer)
        elif self.state in _UNTERMINATED_STATES:
            fragment = self.source[self.start:]
            raise UnterminatedToken(
                f"Unterminated token {fragment!r} at end of {self.source!r}",
                fragment=fragment,
                source=self.source,
                state=self.state,
            )
        elif self.state in ("ampersand", "pipe"):
            fragment = self.source[self.start:]
            raise UnterminatedCombinator(
                f"Unterminated combinator {fragment!r} at end of {self.source!r}",
                fragment=fragment,
                source=self.source,
                state=self.state,
            )


def tokenize(source: str) -> list[Token]:
    """Split a CSS value definition into a flat list of tokens."""
    return _Tokenizer(source).run()
