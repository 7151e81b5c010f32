"""Shared constants for l10ntree.

Centralizes the configuration constants used by the syntax, runtime and
localization packages. Keeping them here avoids circular imports and gives
one place to tune limits.

Constants are grouped by domain:
- Key handling: separator and reserved segments for dotted lookup keys
- Depth limits: recursion protection for parsing and formatting
- Cache limits: memory bounds for locale data caching
- Input limits: size constraints on template sources

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Key handling
    "KEY_SEPARATOR",
    "POLLUTION_SENTINEL",
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Locale defaults
    "DEFAULT_LOCALE",
]

# ============================================================================
# KEY HANDLING
# ============================================================================

# Separator between package name and key path, and between key path segments.
KEY_SEPARATOR: str = "."

# Reserved segment that must never appear in a lookup key. Translation data is
# frequently shared with JavaScript tooling where this name addresses the
# object prototype; keys carrying it are rejected before any cache access.
POLLUTION_SENTINEL: str = "__proto__"

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of plural/select bodies inside a single message.
# Legitimate messages rarely nest deeper than 3 levels.
MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached LocaleContext instances.
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Maximum template source size in characters (1 MB).
# A single message template beyond this size is malformed data.
MAX_SOURCE_SIZE: int = 1024 * 1024

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# CLDR data used when a configured locale is unknown to Babel.
DEFAULT_LOCALE: str = "en_US"
