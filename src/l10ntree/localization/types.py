"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating Localization call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping

__all__ = [
    "KeyPath",
    "LocaleCode",
    "PackageName",
    "TemplateNode",
    "TemplateStore",
]

type LocaleCode = str
"""BCP-47 or POSIX locale code (e.g., 'en', 'fr-CA', 'pt_BR')."""

type PackageName = str
"""Namespace of translations, the first segment of a lookup key (e.g., 'ui')."""

type KeyPath = tuple[str, ...]
"""Dot-split key inside a package (e.g., ('settings', 'title'))."""

type TemplateNode = str | Mapping[str, TemplateNode]
"""Raw template string (leaf) or nested mapping of further nodes."""

type TemplateStore = Mapping[str, TemplateNode]
"""Caller-owned tree of raw template strings for one package and locale."""
