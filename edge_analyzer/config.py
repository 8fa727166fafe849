"""Configuration constants for the Edge analyzer."""

import os
import re
from dataclasses import dataclass

# Document cache defaults
CACHE_MAX_SIZE = 100
CACHE_TTL_MS = 300_000  # 5 minutes

# Environment overrides read by CacheSettings.from_env()
CACHE_MAX_SIZE_ENV = "EDGE_ANALYZER_CACHE_MAX_SIZE"
CACHE_TTL_MS_ENV = "EDGE_ANALYZER_CACHE_TTL_MS"
LOG_LEVEL_ENV = "EDGE_ANALYZER_LOG_LEVEL"

# Diagnostics
DIAGNOSTIC_SOURCE = "edge"
MAX_COLUMN = 2**31 - 1  # "end of line" for document-wide diagnostics

# Block directives that need a matching @end (or @end<type>)
BLOCK_DIRECTIVES = ("if", "unless", "each", "component", "slot", "section", "block")

# Directives whose argument list is a condition
CONDITION_DIRECTIVES = ("if", "unless", "elseif")

# Loop directives written as "<item> in <collection>"
LOOP_DIRECTIVES = ("each",)

# Directives whose first string argument names an entity
COMPONENT_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9._-]*$")
SLOT_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")
NAMED_DIRECTIVES = {
    "component": COMPONENT_NAME_PATTERN,
    "slot": SLOT_NAME_PATTERN,
    "section": SLOT_NAME_PATTERN,
    "block": SLOT_NAME_PATTERN,
}

# Directives whose first string argument is a template path
INCLUDE_DIRECTIVES = ("include", "includeIf")

# Node types that hold an interpolated expression
INTERPOLATION_TYPES = ("interpolation", "safe_interpolation")


@dataclass
class CacheSettings:
    """Size and time-to-live limits for the document cache."""
    max_size: int = CACHE_MAX_SIZE
    ttl_ms: int = CACHE_TTL_MS

    @classmethod
    def from_env(cls) -> "CacheSettings":
        """Read settings from the environment, falling back to the defaults."""
        return cls(
            max_size=_int_from_env(CACHE_MAX_SIZE_ENV, CACHE_MAX_SIZE),
            ttl_ms=_int_from_env(CACHE_TTL_MS_ENV, CACHE_TTL_MS),
        )


def _int_from_env(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
