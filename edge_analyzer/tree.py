"""Immutable syntax trees.

A tree keeps every node in one list, ordered pre-order (which is document
order). A ``Node`` is only a handle: the tree it belongs to plus an index.
Nodes have no back-pointers of their own; parents and ancestors are looked
up through the tree.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from .utils import LineIndex

# Tokens that close a construct; a cursor after one is outside the construct
_CLOSING_TYPES = frozenset({"}}", "}}}", ")"})


@dataclass(frozen=True)
class NodeRecord:
    """Storage for one node of a SyntaxTree."""
    type: str
    start: int  # offset, inclusive
    end: int  # offset, exclusive
    parent: int  # -1 for the root
    children: tuple[int, ...]
    subtree_end: int  # index just past the last descendant
    is_error: bool = False
    has_error: bool = False


class Node:
    """Handle on a node of a SyntaxTree."""

    __slots__ = ("tree", "index")

    def __init__(self, tree: "SyntaxTree", index: int):
        self.tree = tree
        self.index = index

    @property
    def _record(self) -> NodeRecord:
        return self.tree.records[self.index]

    @property
    def type(self) -> str:
        return self._record.type

    @property
    def start_offset(self) -> int:
        return self._record.start

    @property
    def end_offset(self) -> int:
        return self._record.end

    @property
    def start_point(self) -> tuple[int, int]:
        return self.tree.line_index.position_at(self._record.start)

    @property
    def end_point(self) -> tuple[int, int]:
        return self.tree.line_index.position_at(self._record.end)

    @property
    def text(self) -> str:
        return self.tree.text[self._record.start:self._record.end]

    @property
    def is_error(self) -> bool:
        """True if the parser produced this node while recovering from an error."""
        return self._record.is_error

    @property
    def has_error(self) -> bool:
        """True if this node or any descendant is an error node."""
        return self._record.has_error

    @property
    def parent(self) -> Optional["Node"]:
        parent = self._record.parent
        return Node(self.tree, parent) if parent >= 0 else None

    @property
    def children(self) -> list["Node"]:
        return [Node(self.tree, i) for i in self._record.children]

    @property
    def child_count(self) -> int:
        return len(self._record.children)

    def child_of_type(self, node_type: str) -> Optional["Node"]:
        """Return the first direct child of the given type."""
        for i in self._record.children:
            if self.tree.records[i].type == node_type:
                return Node(self.tree, i)
        return None

    def descendants_of_type(self, node_type: str) -> list["Node"]:
        """Return all descendants of the given type in document order."""
        records = self.tree.records
        return [
            Node(self.tree, i)
            for i in range(self.index + 1, self._record.subtree_end)
            if records[i].type == node_type
        ]

    def __eq__(self, other) -> bool:
        if isinstance(other, Node):
            return self.tree is other.tree and self.index == other.index
        return NotImplemented

    def __hash__(self) -> int:
        return hash((id(self.tree), self.index))

    def __repr__(self) -> str:
        start, end = self.start_point, self.end_point
        return f"<Node {self.type} {start[0]}:{start[1]}-{end[0]}:{end[1]}>"


class SyntaxTree:
    """Parsed form of one document. Never modified after construction."""

    def __init__(self, text: str, records: list[NodeRecord]):
        self.text = text
        self.records = tuple(records)
        self.line_index = LineIndex(text)

    @property
    def root(self) -> Node:
        return Node(self, 0)

    @property
    def has_error(self) -> bool:
        return self.records[0].has_error

    def __len__(self) -> int:
        return len(self.records)

    def walk(self) -> Iterator[Node]:
        """Yield every node in pre-order (document order)."""
        for index in range(len(self.records)):
            yield Node(self, index)

    def ancestors(self, node: Node) -> Iterator[Node]:
        """Yield the parent chain of ``node``, innermost first."""
        parent = self.records[node.index].parent
        while parent >= 0:
            yield Node(self, parent)
            parent = self.records[parent].parent

    def nodes_of_type(self, node_type: str) -> list[Node]:
        return [node for node in self.walk() if node.type == node_type]

    def node_at(self, line: int, column: int) -> Optional[Node]:
        """Return the deepest node containing the position.

        A node contains an offset if start <= offset < end. At the end of
        the document a cursor also resolves into a node that reaches it and
        is still open there (it does not end with a closing token), so text
        being typed at the end of a file resolves to what is being typed.
        Returns None when the position is outside the document.
        """
        offset = self.line_index.offset_at(line, column)
        if offset is None:
            return None
        at_eof = offset == len(self.text)
        current = 0
        while True:
            found = -1
            for child in self.records[current].children:
                record = self.records[child]
                if record.start <= offset < record.end:
                    found = child
                    break
                if at_eof and record.end == offset and self._open_at_end(child):
                    found = child
            if found < 0:
                return Node(self, current)
            current = found

    def _open_at_end(self, index: int) -> bool:
        last = self.records[self.records[index].subtree_end - 1]
        return last.type not in _CLOSING_TYPES
