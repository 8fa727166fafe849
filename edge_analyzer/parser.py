"""Parser adapter: the only way the rest of the analyzer touches the grammar."""

import logging
from functools import lru_cache
from typing import Optional

from .errors import GrammarLoadError
from .grammar import Grammar, load_grammar
from .tree import Node, SyntaxTree

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def initialize() -> Grammar:
    """Load the Edge grammar once per process and return its handle.

    Later calls return the same handle without doing any work. A failure
    raises GrammarLoadError and is not cached, so there is no half-initialized
    state to recover from.
    """
    logger.debug("Initializing Edge grammar")
    try:
        return load_grammar()
    except GrammarLoadError as e:
        logger.error(f"Edge grammar failed to load: {e}")
        raise


class EdgeParser:
    """Parses Edge templates into SyntaxTrees and answers position queries."""

    def __init__(self, grammar: Grammar):
        self._grammar = grammar

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    def parse(self, text: str) -> SyntaxTree:
        """Full parse. Raises EdgeParseError if the text cannot be tokenized."""
        return self._grammar.parse(text)

    def parse_incremental(self, text: str, previous_tree: Optional[SyntaxTree]) -> SyntaxTree:
        """Parse ``text``, reusing ``previous_tree`` where possible.

        The result is always equivalent to ``parse(text)``. The LALR backend
        cannot resume mid-document, so the previous tree is reused only when
        its text is unchanged.
        """
        if previous_tree is not None and previous_tree.text == text:
            return previous_tree
        return self.parse(text)

    def node_at_position(self, tree: SyntaxTree, line: int, column: int) -> Optional[Node]:
        """Return the deepest node at (line, column), or None if out of bounds."""
        return tree.node_at(line, column)

    def nodes_of_type(self, tree: SyntaxTree, node_type: str) -> list[Node]:
        """Return every node of ``node_type`` in document order."""
        return tree.nodes_of_type(node_type)
