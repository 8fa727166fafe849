"""Data types for the Edge analyzer."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional


@dataclass(frozen=True)
class Position:
    """A 0-based (line, character) position in a document."""
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """A start/end position pair, end exclusive."""
    start: Position
    end: Position

    @classmethod
    def from_points(cls, start: tuple[int, int], end: tuple[int, int]) -> "Range":
        return cls(Position(*start), Position(*end))


class DiagnosticSeverity(IntEnum):
    """Diagnostic severities, numbered as in the language server protocol."""
    ERROR = 1
    WARNING = 2


@dataclass(frozen=True)
class Diagnostic:
    """A problem found in a document."""
    severity: DiagnosticSeverity
    range: Range
    message: str
    source: str = "edge"


class ContextKind(Enum):
    """What kind of construct surrounds a cursor."""
    DIRECTIVE = "directive"
    INTERPOLATION = "interpolation"
    STRING_LITERAL = "string_literal"
    PLAIN_TEXT = "plain_text"


@dataclass(frozen=True)
class ContextClassification:
    """Result of classifying a cursor position.

    ``node`` is the deepest syntax node at the cursor when the tree was used,
    None when the textual fallback decided.
    """
    kind: ContextKind
    node: Optional[Any] = None
    used_fallback: bool = False


@dataclass
class BlockFrame:
    """An open block directive waiting for its closer."""
    type: str  # 'if', 'each', 'component', ...
    node: Any


@dataclass
class CacheEntry:
    """A parsed document held by the document cache."""
    uri: str
    version: int
    text: str
    tree: Any
    timestamp: float  # seconds, from the cache's clock
