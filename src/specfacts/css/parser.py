"""CSS value definition syntax parser.

Syntax example:
    [ <length> | auto ]{1,4}
    normal | [ <number> <integer>? ]
    rgb( <percentage>#{3} , <alpha-value>? )
"""

from __future__ import annotations

import logging

from specfacts.config import GrammarConfig
from specfacts.css.assembler import assemble, attach_multipliers
from specfacts.css.errors import UnrecognizedToken
from specfacts.css.terminals import PRIMITIVES, classify
from specfacts.css.tokenizer import tokenize
from specfacts.model.grammar import GrammarNode, Sequence

__all__ = ["parse_grammar"]

logger = logging.getLogger(__name__)


def parse_grammar(text: str, config: GrammarConfig | None = None) -> GrammarNode:
    """Parse a CSS value definition into a grammar tree.

    Raises a :class:`~specfacts.css.errors.GrammarError` subclass on
    malformed input.
    """
    source = text.strip()
    if not source:
        raise UnrecognizedToken("Empty grammar", source=text)

    primitives = PRIMITIVES
    if config is not None and config.extra_primitives:
        primitives = PRIMITIVES | config.extra_primitives

    items = [classify(token, source, primitives) for token in tokenize(source)]
    items = attach_multipliers(items, source)
    node = assemble(items, source)

    # A lone juxtaposition wrapper carries no information.
    if (
        isinstance(node, Sequence)
        and len(node.items) == 1
        and not node.is_repetition
        and not node.optional
    ):
        node = node.items[0]

    logger.debug("Parsed grammar %r into %s", source, type(node).__name__)
    return node
