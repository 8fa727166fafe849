"""Analyzer facade used by the editor-facing layer.

Wires the parser, document cache, structural validator and context
classifier together behind the handful of calls an editor integration
makes: analyze on open/change, invalidate on close, classify on cursor
queries.
"""

import logging
from typing import Optional

from .cache import DocumentCache
from .config import DIAGNOSTIC_SOURCE, MAX_COLUMN, CacheSettings
from .context import ContextClassifier
from .errors import EdgeParseError
from .parser import EdgeParser, initialize
from .types import ContextClassification, Diagnostic, DiagnosticSeverity, Position, Range
from .validator import StructuralValidator

logger = logging.getLogger(__name__)


def parse_failure_diagnostic(error: EdgeParseError) -> Diagnostic:
    """Build the document-wide diagnostic reported when a parse fails outright."""
    return Diagnostic(
        severity=DiagnosticSeverity.ERROR,
        range=Range(Position(0, 0), Position(0, MAX_COLUMN)),
        message=f"Parse error: {error}",
        source=DIAGNOSTIC_SOURCE,
    )


class EdgeAnalyzer:
    """Incremental analysis of Edge documents.

    Every collaborator can be injected; missing ones are built from the
    process-wide grammar handle and default cache settings.
    """

    def __init__(
        self,
        parser: Optional[EdgeParser] = None,
        cache: Optional[DocumentCache] = None,
        validator: Optional[StructuralValidator] = None,
        classifier: Optional[ContextClassifier] = None,
        settings: Optional[CacheSettings] = None,
    ):
        if parser is None:
            parser = EdgeParser(initialize())
        if cache is None:
            settings = settings or CacheSettings()
            cache = DocumentCache(parser, max_size=settings.max_size, ttl_millis=settings.ttl_ms)
        self._cache = cache
        self._validator = validator or StructuralValidator()
        self._classifier = classifier or ContextClassifier(parser)

    @property
    def cache(self) -> DocumentCache:
        return self._cache

    def analyze(self, uri: str, version: int, text: str) -> list[Diagnostic]:
        """Refresh the cached tree for a document and validate it.

        Raises:
            EdgeParseError: the document could not be parsed at all. Callers
                usually publish ``parse_failure_diagnostic(error)`` instead.
        """
        tree = self._cache.get_or_parse(uri, version, text)
        return self._validator.validate(tree)

    def invalidate(self, uri: str) -> None:
        self._cache.invalidate(uri)

    def invalidate_all(self) -> None:
        self._cache.invalidate_all()

    def classify(self, uri: str, text: str, line: int, character: int) -> ContextClassification:
        """Classify a cursor position in a document.

        Reuses the cached tree when it was parsed from the same text; never
        writes to the cache.
        """
        entry = self._cache.peek(uri)
        tree = entry.tree if entry is not None and entry.text == text else None
        return self._classifier.classify(text, line, character, tree=tree)

    def configure(self, max_size: Optional[int] = None, ttl_ms: Optional[int] = None) -> None:
        """Apply new cache limits and drop every cached tree."""
        self._cache.configure(max_size=max_size, ttl_millis=ttl_ms)
        self._cache.invalidate_all()
        logger.info(
            f"Cache reconfigured: max_size={self._cache.max_size}, ttl_ms={self._cache.ttl_millis}"
        )
