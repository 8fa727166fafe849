"""Document cache: parsed trees keyed by document URI."""

import logging
import time
from typing import Callable, Optional

from .config import CACHE_MAX_SIZE, CACHE_TTL_MS
from .parser import EdgeParser
from .tree import SyntaxTree
from .types import CacheEntry

logger = logging.getLogger(__name__)


class DocumentCache:
    """Caches parse results to avoid reparsing unchanged documents.

    An entry is reused only while its version and text both match the
    document and it is younger than the time-to-live. Expiry is checked
    when an entry is looked up; size is enforced after every insert by
    dropping the entries written longest ago.
    """

    def __init__(
        self,
        parser: EdgeParser,
        max_size: int = CACHE_MAX_SIZE,
        ttl_millis: int = CACHE_TTL_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._parser = parser
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock
        self._max_size = _check_limit("max_size", max_size)
        self._ttl_millis = _check_limit("ttl_millis", ttl_millis)

    @property
    def max_size(self) -> int:
        return self._max_size

    @max_size.setter
    def max_size(self, value: int) -> None:
        self._max_size = _check_limit("max_size", value)
        self._evict()

    @property
    def ttl_millis(self) -> int:
        return self._ttl_millis

    @ttl_millis.setter
    def ttl_millis(self, value: int) -> None:
        self._ttl_millis = _check_limit("ttl_millis", value)

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def configure(self, max_size: Optional[int] = None, ttl_millis: Optional[int] = None) -> None:
        """Update either limit; None leaves it unchanged."""
        if ttl_millis is not None:
            self.ttl_millis = ttl_millis
        if max_size is not None:
            self.max_size = max_size

    def get_or_parse(self, uri: str, version: int, text: str) -> SyntaxTree:
        """Return the cached tree for the document, parsing it if needed.

        A hit returns the very same tree object as the previous call. Parse
        errors propagate to the caller.
        """
        entry = self._lookup(uri)
        if entry is not None and entry.version == version and entry.text == text:
            logger.debug(f"Cache hit for {uri} (version {version})")
            return entry.tree

        logger.debug(f"Cache miss for {uri} (version {version}), parsing")
        tree = self._parser.parse(text)
        # Re-inserting moves the key to the end, keeping dict order = write order
        self._entries.pop(uri, None)
        self._entries[uri] = CacheEntry(
            uri=uri,
            version=version,
            text=text,
            tree=tree,
            timestamp=self._clock(),
        )
        self._evict()
        return tree

    def peek(self, uri: str) -> Optional[CacheEntry]:
        """Return the live entry for ``uri`` without parsing anything."""
        return self._lookup(uri)

    def invalidate(self, uri: str) -> None:
        """Drop the entry for ``uri``, if any."""
        if self._entries.pop(uri, None) is not None:
            logger.debug(f"Invalidated cache entry for {uri}")

    def invalidate_all(self) -> None:
        """Drop every entry."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Invalidated all {count} cache entries")

    def _lookup(self, uri: str) -> Optional[CacheEntry]:
        entry = self._entries.get(uri)
        if entry is None:
            return None
        age_ms = (self._clock() - entry.timestamp) * 1000
        if age_ms >= self._ttl_millis:
            logger.debug(f"Cache entry for {uri} expired after {age_ms:.0f}ms")
            del self._entries[uri]
            return None
        return entry

    def _evict(self) -> None:
        excess = len(self._entries) - self._max_size
        if excess <= 0:
            return
        # sorted() is stable, so equal timestamps evict in write order
        oldest = sorted(self._entries.values(), key=lambda entry: entry.timestamp)
        for entry in oldest[:excess]:
            del self._entries[entry.uri]
        logger.debug(f"Evicted {excess} cache entries (max size {self._max_size})")


def _check_limit(name: str, value: int) -> int:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value
