"""MCP tool definitions for the Edge analyzer server."""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .analyzer import EdgeAnalyzer, parse_failure_diagnostic
from .config import CacheSettings
from .errors import EdgeParseError
from .types import Diagnostic, DiagnosticSeverity

logger = logging.getLogger(__name__)

# Global analyzer instance
analyzer = EdgeAnalyzer(settings=CacheSettings.from_env())

# Create MCP server
mcp = FastMCP("edge-analyzer")


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render a diagnostic as 'Line N, col M [severity]: message' (1-based)."""
    start = diagnostic.range.start
    line_info = f"Line {start.line + 1}"
    if start.character > 0:
        line_info += f", col {start.character + 1}"
    severity = "error" if diagnostic.severity == DiagnosticSeverity.ERROR else "warning"
    return f"{line_info} [{severity}]: {diagnostic.message}"


@mcp.tool()
def edge_validate(uri: str, text: str, version: int = 0) -> str:
    """Validate an Edge template and list its diagnostics.

    Checks block directives against their @end closers, directive arguments
    (conditions, @each loops, component and slot names, include paths) and
    empty interpolations. Unchanged documents are served from the cache.

    Args:
        uri: Document identifier, used as the cache key
        text: Full template source
        version: Document version; bump it on every edit (default 0)

    Example:
        edge_validate("views/home.edge", "@if(user)\\nHi\\n@end")  # No problems
        edge_validate("views/home.edge", "@if(user)\\nHi")  # Missing @end
    """
    try:
        diagnostics = analyzer.analyze(uri, version, text)
    except EdgeParseError as e:
        logger.warning(f"Could not parse {uri}: {e}")
        diagnostics = [parse_failure_diagnostic(e)]

    if not diagnostics:
        return f"No problems found in {uri}"

    errors = sum(1 for d in diagnostics if d.severity == DiagnosticSeverity.ERROR)
    warnings = len(diagnostics) - errors
    lines = [f"{uri}: {errors} error(s), {warnings} warning(s)"]
    for diagnostic in diagnostics:
        lines.append(f"  {format_diagnostic(diagnostic)}")
    return "\n".join(lines)


@mcp.tool()
def edge_classify(uri: str, text: str, line: int, character: int) -> str:
    """Tell what kind of construct surrounds a cursor in an Edge template.

    Reports one of: directive, interpolation, string_literal, plain_text.

    Args:
        uri: Document identifier
        text: Full template source
        line: 0-based line of the cursor
        character: 0-based column of the cursor
    """
    result = analyzer.classify(uri, text, line, character)
    lines = [f"Context: {result.kind.value}"]
    if result.node is not None:
        lines.append(f"Node: {result.node.type}")
    if result.used_fallback:
        lines.append("Resolved from raw text (no usable syntax tree at the cursor)")
    return "\n".join(lines)


@mcp.tool()
def edge_close(uri: str) -> str:
    """Forget the cached parse of a closed document.

    Args:
        uri: Document identifier
    """
    analyzer.invalidate(uri)
    return f"Closed {uri}"


@mcp.tool()
def edge_configure_cache(max_size: Optional[int] = None, ttl_ms: Optional[int] = None) -> str:
    """Change the document cache limits. Clears every cached document.

    Args:
        max_size: Maximum number of cached documents (0 disables caching)
        ttl_ms: Milliseconds before a cached document is considered stale
    """
    try:
        analyzer.configure(max_size=max_size, ttl_ms=ttl_ms)
    except ValueError as e:
        return f"Invalid cache configuration: {e}"
    cache = analyzer.cache
    return f"Cache configured: max_size={cache.max_size}, ttl_ms={cache.ttl_millis}"


@mcp.tool()
def edge_cache_status() -> str:
    """Show how many documents are cached and the current limits."""
    cache = analyzer.cache
    return f"""Document Cache Status:
- Entries: {cache.size}
- Max size: {cache.max_size}
- TTL: {cache.ttl_millis} ms"""
