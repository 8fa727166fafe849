#!/usr/bin/env python3
"""Dump the syntax tree and diagnostics of an Edge template.

Handy when working on grammar.lark: shows exactly which nodes a template
produces and what the validator makes of them.

Usage:
    python scripts/dump_tree.py path/to/template.edge
    python scripts/dump_tree.py --check

Requirements:
    - the edge-analyzer package installed (pip install -e .)
"""

import sys
from pathlib import Path

from edge_analyzer.errors import EdgeParseError, GrammarLoadError
from edge_analyzer.grammar import get_grammar_path
from edge_analyzer.parser import EdgeParser, initialize
from edge_analyzer.tools import format_diagnostic
from edge_analyzer.validator import StructuralValidator


def dump(path: Path) -> bool:
    """Print the tree and diagnostics for one template.

    Returns:
        True if the template parsed, False otherwise.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {path}: {e}")
        return False

    parser = EdgeParser(initialize())
    try:
        tree = parser.parse(text)
    except EdgeParseError as e:
        print(f"Parse error: {e}")
        return False

    for node in tree.walk():
        depth = sum(1 for _ in tree.ancestors(node))
        flag = "  !" if node.is_error else ""
        print(f"{'  ' * depth}{node!r}{flag}")

    diagnostics = StructuralValidator().validate(tree)
    print(f"\n{len(diagnostics)} diagnostic(s)")
    for diagnostic in diagnostics:
        print(f"  {format_diagnostic(diagnostic)}")
    return True


def check_grammar() -> bool:
    """Check that the bundled grammar loads."""
    try:
        initialize()
    except GrammarLoadError as e:
        print(f"Grammar failed to load: {e}")
        return False
    print(f"Grammar OK: {get_grammar_path()}")
    return True


if __name__ == "__main__":
    if "--check" in sys.argv:
        sys.exit(0 if check_grammar() else 1)
    elif len(sys.argv) == 2:
        sys.exit(0 if dump(Path(sys.argv[1])) else 1)
    else:
        print(__doc__)
        sys.exit(2)
