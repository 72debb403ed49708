from specfacts.css.errors import (
    GrammarError,
    InvalidMultiplier,
    MalformedMultiplier,
    UnexpectedCharacter,
    UnrecognizedToken,
    UnterminatedBracketGroup,
    UnterminatedCombinator,
    UnterminatedFunction,
    UnterminatedToken,
)
from specfacts.css.parser import parse_grammar
from specfacts.css.terminals import PRIMITIVES
from specfacts.css.tokenizer import tokenize

__all__ = [
    "parse_grammar",
    "tokenize",
    "PRIMITIVES",
    "GrammarError",
    "UnexpectedCharacter",
    "UnterminatedToken",
    "UnterminatedCombinator",
    "UnrecognizedToken",
    "MalformedMultiplier",
    "InvalidMultiplier",
    "UnterminatedFunction",
    "UnterminatedBracketGroup",
]
