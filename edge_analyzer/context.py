"""Cursor context classification.

Decides whether a cursor sits in a directive, an interpolation, a string
literal or plain text. The syntax tree decides when it has a well-formed node
at the cursor; otherwise the raw text is scanned, which is what keeps
completion working while the user is halfway through typing a construct.
"""

import logging
import re
from typing import Optional

from .config import INTERPOLATION_TYPES
from .errors import EdgeParseError
from .parser import EdgeParser
from .tree import Node, SyntaxTree
from .types import ContextClassification, ContextKind
from .utils import LineIndex

logger = logging.getLogger(__name__)

STRING_TYPES = ("string",)

# Directive name typed so far after an '@' marker, with optional '!'
_MARKER_NAME = re.compile(r"!?[A-Za-z0-9_]*")
_QUOTES = "'\"`"


class ContextClassifier:
    """Classifies cursor positions. Holds no state between calls."""

    def __init__(self, parser: Optional[EdgeParser] = None):
        self._parser = parser

    def classify(
        self,
        text: str,
        line: int,
        column: int,
        tree: Optional[SyntaxTree] = None,
    ) -> ContextClassification:
        """Classify the cursor at (line, column) in ``text``.

        ``tree`` must be the parse of ``text`` if given. Without one the
        classifier parses ``text`` itself when it has a parser, and falls
        back to scanning the text when it has none or the parse fails.
        """
        if tree is None and self._parser is not None:
            try:
                tree = self._parser.parse(text)
            except EdgeParseError as e:
                logger.debug(f"Parse failed during classification, using text scan: {e}")

        if tree is not None:
            node = tree.node_at(line, column)
            if node is not None and not _in_error_region(tree, node):
                return ContextClassification(kind=_kind_from_tree(tree, node), node=node)

        return self.classify_text(text, line, column)

    def classify_text(self, text: str, line: int, column: int) -> ContextClassification:
        """Classify the cursor from the raw text alone."""
        offset = LineIndex(text).offset_at(line, column)
        if offset is None:
            return ContextClassification(kind=ContextKind.PLAIN_TEXT, used_fallback=True)

        before = text[:offset]
        if _inside_interpolation(before):
            kind = ContextKind.INTERPOLATION
        else:
            line_prefix = before[before.rfind("\n") + 1:]
            kind = _kind_from_line(line_prefix)
        return ContextClassification(kind=kind, used_fallback=True)


def _in_error_region(tree: SyntaxTree, node: Node) -> bool:
    if node.is_error:
        return True
    return any(ancestor.is_error for ancestor in tree.ancestors(node))


def _kind_from_tree(tree: SyntaxTree, node: Node) -> ContextKind:
    for current in (node, *tree.ancestors(node)):
        if current.type in INTERPOLATION_TYPES:
            return ContextKind.INTERPOLATION
        if current.type.endswith("_directive"):
            return ContextKind.DIRECTIVE
        if current.type in STRING_TYPES:
            return ContextKind.STRING_LITERAL
    return ContextKind.PLAIN_TEXT


def _inside_interpolation(before: str) -> bool:
    """True if the last mustache opened before the cursor is still open.

    Comments (``{{--``) and escaped mustaches (``@{{``) are not interpolations.
    """
    opened = before.rfind("{{")
    if opened < 0 or opened < before.rfind("}}"):
        return False
    # rfind lands on the last two braces of '{{{'; move to the first
    while opened > 0 and before[opened - 1] == "{":
        opened -= 1
    if before.startswith("{{--", opened):
        return False
    return not (opened > 0 and before[opened - 1] == "@")


def _kind_from_line(line_prefix: str) -> ContextKind:
    """Classify from the current line up to the cursor.

    The last '@' on the line, unless it sits inside a string, is the
    directive marker being typed. Past a closed argument list (or without a
    marker) a quote left open on the line means the cursor is in a string.
    """
    marker = line_prefix.rfind("@")
    if marker >= 0 and _open_quote(line_prefix[:marker]) is None:
        name_end = _MARKER_NAME.match(line_prefix, marker + 1).end()
        if name_end == len(line_prefix):
            return ContextKind.DIRECTIVE
        if line_prefix[name_end] == "(":
            kind = _kind_in_arguments(line_prefix[name_end:])
            if kind is not None:
                return kind

    if _open_quote(line_prefix) is not None:
        return ContextKind.STRING_LITERAL
    return ContextKind.PLAIN_TEXT


def _kind_in_arguments(source: str) -> Optional[ContextKind]:
    """Classify a cursor at the end of ``source``, an argument list opened by '('.

    Returns None once the list has been closed.
    """
    depth = 0
    quote = None
    for char in source:
        if quote is not None:
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return None

    if quote is not None:
        return ContextKind.STRING_LITERAL
    return ContextKind.DIRECTIVE


def _open_quote(source: str) -> Optional[str]:
    """Return the quote character left open at the end of ``source``, if any."""
    quote = None
    for char in source:
        if quote is None:
            if char in _QUOTES:
                quote = char
        elif char == quote:
            quote = None
    return quote
