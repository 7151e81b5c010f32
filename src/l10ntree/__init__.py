"""l10ntree - namespaced ICU MessageFormat localization with layered caches.

Resolves dotted keys such as ``ui.settings.title`` against nested template
stores, one per package and locale. Templates are parsed and compiled
lazily, exactly once per path, and looked up in strict locale priority
order. Keys nothing resolves render as a diagnostic fallback instead of
raising.

Public API:
    Localization - Package registry and entry point (format_value)
    PackageLocalization - Locale fallback chain of one package
    FallbackInfo - Payload of the on_fallback callback
    parse_message - Parse an ICU MessageFormat template to AST
    compile_message - Bind a parsed message to a locale
    FormatValue - Type alias for values accepted as message arguments

Exceptions:
    LocalizationError - Base exception class
    MessageSyntaxError - Template parse errors
    MessageFormatError - Argument errors while rendering
    KeyPollutionError - Reserved segment in a lookup key

Submodules:
    l10ntree.syntax - Parser and AST node types
    l10ntree.runtime - Formatter, LocaleContext, plural rules
    l10ntree.localization - Router, resolvers, cache trees
    l10ntree.diagnostics - Diagnostic codes and error formatting
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .errors import KeyPollutionError, LocalizationError, MessageFormatError, MessageSyntaxError
from .localization import FallbackInfo, Localization, PackageLocalization
from .runtime import FormatValue, compile_message
from .syntax import parse_message

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("l10ntree")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "FallbackInfo",
    "FormatValue",
    "KeyPollutionError",
    "Localization",
    "LocalizationError",
    "MessageFormatError",
    "MessageSyntaxError",
    "PackageLocalization",
    "__version__",
    "compile_message",
    "parse_message",
]
