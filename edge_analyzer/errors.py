"""Exception classes for the Edge analyzer."""

from typing import Optional


class EdgeAnalyzerError(Exception):
    """Base class for analyzer errors."""


class GrammarLoadError(EdgeAnalyzerError):
    """The Edge grammar could not be loaded.

    Raised at startup only. Nothing can be analyzed without a grammar, so
    callers should let it terminate the process.
    """


class EdgeParseError(EdgeAnalyzerError):
    """The grammar could not tokenize a document at all.

    Most malformed templates still parse into a tree with error nodes; this is
    raised only when no tree can be produced. ``line`` and ``column`` are
    0-based when the parser reported a location.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column
        super().__init__(message)

    def __str__(self):
        message = self.args[0]
        if self.line is not None:
            location = f"line {self.line + 1}"
            if self.column is not None:
                location += f", col {self.column + 1}"
            return f"{message} ({location})"
        return message
