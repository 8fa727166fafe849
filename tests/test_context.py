"""Tests for cursor context classification."""

import pytest

from edge_analyzer.context import ContextClassifier
from edge_analyzer.errors import EdgeParseError
from edge_analyzer.types import ContextKind


class TestTreeClassification:
    """Classification driven by the syntax tree."""

    def test_inside_interpolation(self, classifier):
        text = "@if(user)\n{{ user.name }}\n@end"
        result = classifier.classify(text, 1, 5)
        assert result.kind == ContextKind.INTERPOLATION
        assert result.node.type == "expression"
        assert not result.used_fallback

    def test_inside_safe_interpolation(self, classifier):
        assert classifier.classify("{{{ html }}}", 0, 5).kind == ContextKind.INTERPOLATION

    def test_on_directive_name(self, classifier):
        result = classifier.classify("@if(user)\n@end", 0, 1)
        assert result.kind == ContextKind.DIRECTIVE
        assert result.node.type == "directive_name"

    def test_in_directive_arguments(self, classifier):
        assert classifier.classify("@if(user)\n@end", 0, 5).kind == ContextKind.DIRECTIVE

    def test_in_string_argument(self, classifier):
        result = classifier.classify("@include('partials/header')", 0, 12)
        assert result.kind == ContextKind.STRING_LITERAL
        assert result.node.type == "string"

    def test_plain_text(self, classifier):
        result = classifier.classify("Hello world", 0, 3)
        assert result.kind == ContextKind.PLAIN_TEXT
        assert result.node.type == "text"

    def test_comment_is_plain_text(self, classifier):
        assert classifier.classify("{{-- {{ x }} --}}", 0, 8).kind == ContextKind.PLAIN_TEXT

    def test_escaped_mustache_is_plain_text(self, classifier):
        assert classifier.classify("@{{ x }}", 0, 4).kind == ContextKind.PLAIN_TEXT

    def test_uses_given_tree(self, parser, mocker):
        classifier = ContextClassifier(parser)
        tree = parser.parse("{{ a }}")
        spy = mocker.spy(parser, "parse")
        result = classifier.classify("{{ a }}", 0, 3, tree=tree)
        assert result.kind == ContextKind.INTERPOLATION
        assert spy.call_count == 0


class TestFallbackClassification:
    """Classification from raw text when the tree cannot decide."""

    def test_unclosed_interpolation(self, classifier):
        result = classifier.classify("Hello {{ user.na", 0, 16)
        assert result.kind == ContextKind.INTERPOLATION
        assert result.used_fallback
        assert result.node is None

    def test_unclosed_argument_list(self, classifier):
        result = classifier.classify("@if(user", 0, 8)
        assert result.kind == ContextKind.DIRECTIVE
        assert result.used_fallback

    def test_unterminated_string(self, classifier):
        result = classifier.classify("@include('par", 0, 13)
        assert result.kind == ContextKind.STRING_LITERAL
        assert result.used_fallback

    def test_out_of_bounds(self, classifier):
        result = classifier.classify("Hello", 3, 0)
        assert result.kind == ContextKind.PLAIN_TEXT
        assert result.used_fallback

    def test_parse_failure_falls_back(self, parser, mocker):
        mocker.patch.object(parser, "parse", side_effect=EdgeParseError("bad"))
        result = ContextClassifier(parser).classify("{{ x }}", 0, 3)
        assert result.kind == ContextKind.INTERPOLATION
        assert result.used_fallback

    def test_without_parser(self):
        result = ContextClassifier().classify("@if(a", 0, 5)
        assert result.kind == ContextKind.DIRECTIVE
        assert result.used_fallback


class TestClassifyText:
    """Tests for the textual scan on its own."""

    @pytest.mark.parametrize("text,column,kind", [
        ("{{ user }}", 4, ContextKind.INTERPOLATION),
        ("{{{ html }}}", 5, ContextKind.INTERPOLATION),
        ("{{ a }} b", 8, ContextKind.PLAIN_TEXT),
        ("{{-- note", 7, ContextKind.PLAIN_TEXT),
        ("@{{ raw", 5, ContextKind.PLAIN_TEXT),
        ("@", 1, ContextKind.DIRECTIVE),
        ("  @inc", 6, ContextKind.DIRECTIVE),
        ("@!comp", 6, ContextKind.DIRECTIVE),
        ("@if(a", 5, ContextKind.DIRECTIVE),
        ("@if(a) then", 10, ContextKind.PLAIN_TEXT),
        ("@if(check(a)", 12, ContextKind.DIRECTIVE),
        ("@include('pa", 12, ContextKind.STRING_LITERAL),
        ("@include('a', 'b", 16, ContextKind.STRING_LITERAL),
        ("@include('a', ", 14, ContextKind.DIRECTIVE),
        ("@if x", 5, ContextKind.PLAIN_TEXT),
        ("mail me @if(", 12, ContextKind.DIRECTIVE),
        ("text @inc", 9, ContextKind.DIRECTIVE),
        ("<p>@if(user", 11, ContextKind.DIRECTIVE),
        ("me@example.com", 14, ContextKind.PLAIN_TEXT),
        ('Hello "wor', 10, ContextKind.STRING_LITERAL),
        ('say "hi" now', 12, ContextKind.PLAIN_TEXT),
        ("<img src='logo.png", 18, ContextKind.STRING_LITERAL),
        ("<p>@if(a) 'x", 12, ContextKind.STRING_LITERAL),
        ("@include('a@b", 13, ContextKind.STRING_LITERAL),
        ('Write to "me@ex', 15, ContextKind.STRING_LITERAL),
        ("plain", 2, ContextKind.PLAIN_TEXT),
    ])
    def test_classify_text(self, text, column, kind):
        result = ContextClassifier().classify_text(text, 0, column)
        assert result.kind == kind
        assert result.used_fallback

    def test_interpolation_spanning_lines(self):
        result = ContextClassifier().classify_text("{{\n  user.", 1, 7)
        assert result.kind == ContextKind.INTERPOLATION

    def test_only_current_line_counts_for_directives(self):
        result = ContextClassifier().classify_text("@if(a\nplain", 1, 3)
        assert result.kind == ContextKind.PLAIN_TEXT


class TestPathsAgree:
    """Tree and text scan give the same answer on unambiguous positions."""

    @pytest.mark.parametrize("text,line,column", [
        ("{{ user }}", 0, 4),
        ("Hi {{ a + b }} there", 0, 8),
        ("@if(user)\n{{ user.name }}\n@end", 1, 6),
        ("@if(user)\n@end", 0, 2),
        ("@include('partials/header')", 0, 14),
        ("Hello world", 0, 4),
        ("{{ x }}", 0, 7),
        ("@if(a)", 0, 6),
    ])
    def test_agree(self, classifier, text, line, column):
        tree_result = classifier.classify(text, line, column)
        text_result = classifier.classify_text(text, line, column)
        assert not tree_result.used_fallback
        assert tree_result.kind == text_result.kind
