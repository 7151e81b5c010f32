"""Multi-package, multi-locale localization.

Provides the lookup stack from the public router down to the per-locale
caches.

Submodules:
    types    - PEP 695 type aliases (LocaleCode, PackageName, KeyPath, TemplateStore)
    keys     - Key splitting and the reserved-segment guard
    tree     - CacheTree (append-only key-path cache) and its probe outcomes
    engine   - LocaleMessages (one package in one locale)
    package  - PackageLocalization (locale fallback chain of one package)
    router   - Localization (namespace routing and diagnostic fallback)
    fallback - FallbackInfo and the diagnostic fallback text

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from l10ntree.localization.engine import LocaleMessages
from l10ntree.localization.fallback import FallbackInfo, format_fallback
from l10ntree.localization.keys import guard_key_path, split_key
from l10ntree.localization.package import PackageLocalization
from l10ntree.localization.router import Localization
from l10ntree.localization.tree import Blocked, CacheTree, Found, Vacant
from l10ntree.localization.types import (
    KeyPath,
    LocaleCode,
    PackageName,
    TemplateNode,
    TemplateStore,
)

__all__ = [
    # Router and resolvers
    "Localization",
    "PackageLocalization",
    "LocaleMessages",
    # Caches
    "CacheTree",
    "Found",
    "Vacant",
    "Blocked",
    # Keys
    "split_key",
    "guard_key_path",
    # Fallback
    "FallbackInfo",
    "format_fallback",
    # Type aliases for user code type annotations
    "KeyPath",
    "LocaleCode",
    "PackageName",
    "TemplateNode",
    "TemplateStore",
]
