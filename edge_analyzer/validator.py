"""Structural validation of Edge syntax trees.

One pre-order pass over the tree. Block openers are pushed on a list of
frames; ``@end`` pops the top frame whatever its type, ``@end<type>`` removes
the nearest frame of that type and leaves the frames above it open. Every
node whose subtree holds a parse error is reported, ancestors included. Frames
left over at the end are reported as missing their ``@end``, outermost first.
"""

import logging
import re
from typing import Optional

from .config import (
    BLOCK_DIRECTIVES,
    CONDITION_DIRECTIVES,
    DIAGNOSTIC_SOURCE,
    INCLUDE_DIRECTIVES,
    INTERPOLATION_TYPES,
    LOOP_DIRECTIVES,
    NAMED_DIRECTIVES,
)
from .tree import Node, SyntaxTree
from .types import BlockFrame, Diagnostic, DiagnosticSeverity, Range

logger = logging.getLogger(__name__)

_DIRECTIVE_SUFFIX = "_directive"
_INLINE_PREFIX = "inline_"
_IN_KEYWORD = re.compile(r"\bin\b")


def directive_name(node_type: str) -> Optional[str]:
    """Return the tag name of a directive node type, e.g. 'if' for 'if_directive'.

    Self-closing directives (``@!component``) keep their ``inline_`` prefix.
    Returns None for non-directive node types.
    """
    if not node_type.endswith(_DIRECTIVE_SUFFIX):
        return None
    return node_type[:-len(_DIRECTIVE_SUFFIX)]


def argument_source(node: Node) -> Optional[str]:
    """Return the text between a directive's parentheses, or None without any."""
    arguments = node.child_of_type("arguments")
    if arguments is None:
        return None
    start = arguments.start_offset + 1
    end = arguments.end_offset
    children = arguments.children
    if children and children[-1].type == ")":
        end -= 1
    return node.tree.text[start:end]


def first_string_argument(node: Node) -> Optional[str]:
    """Return the unquoted value of a directive's first string literal."""
    arguments = node.child_of_type("arguments")
    if arguments is None:
        return None
    for string in arguments.descendants_of_type("string"):
        if not string.is_error:
            return string.text[1:-1]
    return None


class StructuralValidator:
    """Produces diagnostics for block matching and directive shape."""

    def validate(self, tree: SyntaxTree) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        stack: list[BlockFrame] = []

        for node in tree.walk():
            if node.has_error:
                diagnostics.append(_error(node, "Syntax error"))

            name = directive_name(node.type)
            if name is not None:
                self._check_directive(node, name, stack, diagnostics)
            elif node.type in INTERPOLATION_TYPES:
                self._check_interpolation(node, diagnostics)

        for frame in stack:
            diagnostics.append(
                _error(frame.node, f"@{frame.type} directive missing its matching @end")
            )

        logger.debug(f"Validation produced {len(diagnostics)} diagnostic(s)")
        return diagnostics

    def _check_directive(
        self,
        node: Node,
        name: str,
        stack: list[BlockFrame],
        diagnostics: list[Diagnostic],
    ) -> None:
        if name in BLOCK_DIRECTIVES:
            stack.append(BlockFrame(type=name, node=node))

        if name in CONDITION_DIRECTIVES:
            condition = argument_source(node)
            if condition is None or not condition.strip():
                diagnostics.append(_error(node, f"@{name} directive missing condition"))

        if name in LOOP_DIRECTIVES:
            loop = argument_source(node) or ""
            if not _IN_KEYWORD.search(loop):
                diagnostics.append(_error(node, f'@{name} directive missing "in" keyword'))

        entity = name[len(_INLINE_PREFIX):] if name.startswith(_INLINE_PREFIX) else name
        pattern = NAMED_DIRECTIVES.get(entity)
        if pattern is not None:
            value = first_string_argument(node)
            if value is not None and not pattern.match(value):
                diagnostics.append(
                    _warning(node, f"{entity.capitalize()} name should follow naming conventions")
                )

        if name in INCLUDE_DIRECTIVES:
            path = first_string_argument(node)
            if path is not None and ".." in path:
                diagnostics.append(_warning(node, "Avoid relative paths in includes"))

        if name == "end":
            if stack:
                stack.pop()
            else:
                diagnostics.append(_error(node, "@end without matching block directive"))
        elif name.startswith("end"):
            self._close_typed(node, name[3:], stack, diagnostics)

    def _close_typed(
        self,
        node: Node,
        block: str,
        stack: list[BlockFrame],
        diagnostics: list[Diagnostic],
    ) -> None:
        for i in range(len(stack) - 1, -1, -1):
            if stack[i].type == block:
                del stack[i]
                return
        diagnostics.append(
            _error(node, f"@end{block} without matching @{block} directive")
        )

    def _check_interpolation(self, node: Node, diagnostics: list[Diagnostic]) -> None:
        expression = node.child_of_type("expression")
        if expression is None or not expression.text.strip():
            diagnostics.append(_warning(node, "Empty interpolation"))


def _range(node: Node) -> Range:
    return Range.from_points(node.start_point, node.end_point)


def _error(node: Node, message: str) -> Diagnostic:
    return Diagnostic(DiagnosticSeverity.ERROR, _range(node), message, DIAGNOSTIC_SOURCE)


def _warning(node: Node, message: str) -> Diagnostic:
    return Diagnostic(DiagnosticSeverity.WARNING, _range(node), message, DIAGNOSTIC_SOURCE)
