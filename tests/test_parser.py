"""Tests for the parser adapter."""

import pytest

from edge_analyzer.errors import GrammarLoadError
from edge_analyzer.parser import EdgeParser, initialize


class TestInitialize:
    """Tests for the once-per-process grammar handle."""

    def test_returns_same_handle(self):
        assert initialize() is initialize()

    def test_failure_is_not_cached(self, mocker):
        sentinel = object()
        initialize.cache_clear()
        load = mocker.patch(
            "edge_analyzer.parser.load_grammar",
            side_effect=[GrammarLoadError("boom"), sentinel],
        )
        try:
            with pytest.raises(GrammarLoadError):
                initialize()
            assert initialize() is sentinel
            assert initialize() is sentinel
            assert load.call_count == 2
        finally:
            initialize.cache_clear()


class TestEdgeParser:
    """Tests for EdgeParser."""

    def test_exposes_grammar(self, grammar):
        assert EdgeParser(grammar).grammar is grammar

    def test_parse_is_deterministic(self, parser):
        text = "@if(a)\n{{ b }}\n@end"
        first = [(n.type, n.start_offset, n.end_offset) for n in parser.parse(text).walk()]
        second = [(n.type, n.start_offset, n.end_offset) for n in parser.parse(text).walk()]
        assert first == second

    def test_incremental_reuses_unchanged_tree(self, parser):
        tree = parser.parse("@if(a)\n@end")
        assert parser.parse_incremental("@if(a)\n@end", tree) is tree

    def test_incremental_matches_full_parse(self, parser):
        previous = parser.parse("@if(a)\n@end")
        text = "@if(a)\n{{ b }}\n@end"
        incremental = parser.parse_incremental(text, previous)
        full = parser.parse(text)
        assert incremental.text == text
        assert incremental.records == full.records

    def test_incremental_without_previous_tree(self, parser):
        tree = parser.parse_incremental("Hello", None)
        assert [n.type for n in tree.walk()] == ["document", "text"]

    def test_node_at_position(self, parser):
        tree = parser.parse("@if(a)\n{{ b }}\n@end")
        assert parser.node_at_position(tree, 1, 3).type == "expression"

    def test_node_at_position_out_of_bounds(self, parser):
        tree = parser.parse("@if(a)\n@end")
        assert parser.node_at_position(tree, 7, 0) is None
        assert parser.node_at_position(tree, 0, 50) is None

    def test_nodes_of_type_in_document_order(self, parser):
        tree = parser.parse("@if(a)\n@if(b)\n@end\n@end")
        nodes = parser.nodes_of_type(tree, "if_directive")
        assert [n.text for n in nodes] == ["@if(a)", "@if(b)"]
