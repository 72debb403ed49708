"""CSS value grammar error types."""


class GrammarError(ValueError):
    """Raised when a CSS value definition cannot be parsed.

    ``fragment`` is the offending character or token text, ``source`` the
    full grammar string and ``state`` the tokenizer state at failure (only
    set for errors raised while tokenizing).
    """

    def __init__(
        self,
        message: str,
        fragment: str = "",
        source: str = "",
        state: str | None = None,
    ):
        self.fragment = fragment
        self.source = source
        self.state = state
        super().__init__(message)


class UnexpectedCharacter(GrammarError):
    pass


class UnterminatedToken(GrammarError):
    pass


class UnterminatedCombinator(GrammarError):
    pass


class UnrecognizedToken(GrammarError):
    pass


class MalformedMultiplier(GrammarError):
    pass


class InvalidMultiplier(GrammarError):
    """A multiplier applied to something it cannot modify (``foo!``)."""


class UnterminatedFunction(GrammarError):
    pass


class UnterminatedBracketGroup(GrammarError):
    pass
