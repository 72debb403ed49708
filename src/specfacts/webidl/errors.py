"""WebIDL front end error types."""


class IdlSyntaxError(Exception):
    """Raised when IDL text is rejected by the WebIDL grammar."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        snippet: str = "",
    ):
        self.line = line
        self.column = column
        self.snippet = snippet
        super().__init__(message)
