"""Edge grammar loading and syntax tree construction.

The grammar lives in ``grammar.lark`` next to this module and is compiled
into an LALR parser with lark's contextual lexer. Parse results are turned
into immutable ``SyntaxTree`` arenas; lark trees never leave this module.
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark, Token, Tree
from lark.exceptions import LarkError, UnexpectedInput

from .errors import EdgeParseError, GrammarLoadError
from .tree import NodeRecord, SyntaxTree

logger = logging.getLogger(__name__)

# Rule name -> (node type, is error node)
_RULE_TYPES = {
    "text": ("text", False),
    "comment": ("comment", False),
    "unclosed_comment": ("comment", True),
    "escaped_interpolation": ("escaped_interpolation", False),
    "unclosed_escaped_interpolation": ("escaped_interpolation", True),
    "interpolation": ("interpolation", False),
    "unclosed_interpolation": ("interpolation", True),
    "safe_interpolation": ("safe_interpolation", False),
    "unclosed_safe_interpolation": ("safe_interpolation", True),
    "expression": ("expression", False),
    "safe_expression": ("expression", False),
    "arguments": ("arguments", False),
    "unclosed_arguments": ("arguments", True),
    "parenthesized": ("parenthesized", False),
    "unclosed_parenthesized": ("parenthesized", True),
    "string": ("string", False),
    "unterminated_string": ("string", True),
}

# Rules whose single token is not kept as a separate node
_LEAF_RULES = frozenset({
    "text",
    "comment",
    "unclosed_comment",
    "escaped_interpolation",
    "unclosed_escaped_interpolation",
    "expression",
    "safe_expression",
    "string",
    "unterminated_string",
})

_TOKEN_TYPES = {
    "MUSTACHE_OPEN": "{{",
    "MUSTACHE_CLOSE": "}}",
    "SAFE_OPEN": "{{{",
    "SAFE_CLOSE": "}}}",
    "LPAR": "(",
    "RPAR": ")",
    "ARG_TEXT": "argument_text",
}


def get_grammar_path() -> Path:
    """Get the path to the bundled grammar file."""
    return Path(__file__).parent / "grammar.lark"


def directive_type(name: str) -> str:
    """Map a tag name such as ``@if`` or ``@!component`` to its node type."""
    bare = name.lstrip("@")
    if bare.startswith("!"):
        return f"inline_{bare[1:]}_directive"
    return f"{bare}_directive"


class Grammar:
    """Handle on a loaded Edge grammar.

    Obtained from ``load_grammar()`` (or ``parser.initialize()``, which loads
    it once per process) and passed to ``EdgeParser``.
    """

    def __init__(self, lark: Lark, path: Path):
        self._lark = lark
        self.path = path

    def parse(self, text: str) -> SyntaxTree:
        """Parse a document into a SyntaxTree.

        Raises:
            EdgeParseError: the text could not be tokenized.
        """
        try:
            parse_tree = self._lark.parse(text)
        except UnexpectedInput as e:
            line = e.line - 1 if getattr(e, "line", -1) > 0 else None
            column = e.column - 1 if getattr(e, "column", -1) > 0 else None
            raise EdgeParseError(
                f"Unexpected input: {type(e).__name__}", line=line, column=column
            ) from e
        return _TreeBuilder(text).build(parse_tree)


def load_grammar(path: Optional[Path] = None) -> Grammar:
    """Read and compile the Edge grammar.

    Raises:
        GrammarLoadError: the grammar file is missing or invalid.
    """
    path = path or get_grammar_path()
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        raise GrammarLoadError(f"Cannot read Edge grammar at {path}: {e}") from e

    try:
        lark = Lark(
            source,
            start="start",
            parser="lalr",
            lexer="contextual",
            propagate_positions=True,
            maybe_placeholders=False,
        )
    except LarkError as e:
        raise GrammarLoadError(f"Invalid Edge grammar at {path}: {e}") from e

    logger.debug(f"Loaded Edge grammar from {path}")
    return Grammar(lark, path)


class _TreeBuilder:
    """Flattens a lark parse tree into SyntaxTree node records."""

    def __init__(self, text: str):
        self.text = text
        self._types: list[str] = []
        self._spans: list[tuple[int, int]] = []
        self._parents: list[int] = []
        self._children: list[list[int]] = []
        self._errors: list[bool] = []

    def build(self, parse_tree: Tree) -> SyntaxTree:
        root = self._add("document", 0, len(self.text), -1)
        for child in parse_tree.children:
            self._visit(child, root)
        return SyntaxTree(self.text, self._records())

    def _add(self, node_type: str, start: int, end: int, parent: int, is_error: bool = False) -> int:
        index = len(self._types)
        self._types.append(node_type)
        self._spans.append((start, end))
        self._parents.append(parent)
        self._children.append([])
        self._errors.append(is_error)
        if parent >= 0:
            self._children[parent].append(index)
        return index

    def _visit(self, item, parent: int) -> None:
        if isinstance(item, Token):
            node_type = _TOKEN_TYPES.get(item.type, item.type.lower())
            self._add(node_type, item.start_pos, item.end_pos, parent)
            return

        rule = str(item.data)
        if rule == "tag":
            self._visit_tag(item, parent)
            return

        node_type, is_error = _RULE_TYPES[rule]
        index = self._add(node_type, item.meta.start_pos, item.meta.end_pos, parent, is_error)
        if rule in _LEAF_RULES:
            return
        for child in item.children:
            self._visit(child, index)

    def _visit_tag(self, tag: Tree, parent: int) -> None:
        # The name token includes the line's indentation; the node starts at '@'
        name_token = tag.children[0]
        start = name_token.start_pos + name_token.value.index("@")
        name = self.text[start:name_token.end_pos]
        index = self._add(directive_type(name), start, tag.meta.end_pos, parent)
        self._add("directive_name", start, name_token.end_pos, index)
        for child in tag.children[1:]:
            self._visit(child, index)

    def _records(self) -> list[NodeRecord]:
        count = len(self._types)
        subtree_end = [i + 1 for i in range(count)]
        has_error = list(self._errors)
        # Children always follow their parent, so one reverse pass suffices
        for index in range(count - 1, 0, -1):
            parent = self._parents[index]
            subtree_end[parent] = max(subtree_end[parent], subtree_end[index])
            has_error[parent] = has_error[parent] or has_error[index]

        return [
            NodeRecord(
                type=self._types[i],
                start=self._spans[i][0],
                end=self._spans[i][1],
                parent=self._parents[i],
                children=tuple(self._children[i]),
                subtree_end=subtree_end[i],
                is_error=self._errors[i],
                has_error=has_error[i],
            )
            for i in range(count)
        ]
