"""Pytest fixtures for Edge analyzer tests."""

import pytest

from edge_analyzer.analyzer import EdgeAnalyzer
from edge_analyzer.cache import DocumentCache
from edge_analyzer.context import ContextClassifier
from edge_analyzer.parser import EdgeParser, initialize
from edge_analyzer.validator import StructuralValidator


class FakeClock:
    """Manually advanced clock for cache staleness tests."""

    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms / 1000


@pytest.fixture(scope="session")
def grammar():
    """Provide the process-wide grammar handle."""
    return initialize()


@pytest.fixture
def parser(grammar):
    return EdgeParser(grammar)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(parser, clock):
    """Provide a small cache driven by the fake clock."""
    return DocumentCache(parser, max_size=3, ttl_millis=1000, clock=clock)


@pytest.fixture
def validator():
    return StructuralValidator()


@pytest.fixture
def classifier(parser):
    return ContextClassifier(parser)


@pytest.fixture
def analyzer(parser, cache):
    return EdgeAnalyzer(parser=parser, cache=cache)


@pytest.fixture
def tool_analyzer(mocker, analyzer):
    """Provide an analyzer patched into the tools module."""
    mocker.patch("edge_analyzer.tools.analyzer", analyzer)
    return analyzer
