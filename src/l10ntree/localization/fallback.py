"""Diagnostic fallback rendering and fallback observability.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass

from l10ntree.localization.types import KeyPath, LocaleCode, PackageName
from l10ntree.runtime import FormatValue

__all__ = ["FallbackInfo", "format_fallback"]


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """A message rendered from a lower-priority locale.

    Passed to ``on_fallback`` so applications can report missing
    translations. Rendering itself is unaffected by the callback.

    Attributes:
        package: Package the message belongs to
        key: Key path inside the package
        requested_locale: First locale of the priority list
        resolved_locale: Locale whose template was rendered

    Example:
        >>> def report(info: FallbackInfo) -> None:
        ...     print(f"{info.package}.{'.'.join(info.key)}: {info.resolved_locale}")
        >>> l10n = Localization(["lv", "en"], on_fallback=report)  # doctest: +SKIP
    """

    package: PackageName
    key: KeyPath
    requested_locale: LocaleCode
    resolved_locale: LocaleCode


def format_fallback(key: str, args: Mapping[str, FormatValue] | None = None) -> str:
    """Render the placeholder shown when no translation resolves.

    Without arguments the key is returned unchanged. Otherwise the arguments
    follow the key as JSON-quoted pairs in mapping order.

    Example:
        >>> format_fallback("missing.key")
        'missing.key'
        >>> format_fallback("missing.key", {"name": "Sam", "count": 3})
        'missing.key: { "name": "Sam", "count": 3 }'
    """
    if not args:
        return key
    pairs = ", ".join(f"{_quote(name)}: {_quote(value)}" for name, value in args.items())
    return f"{key}: {{ {pairs} }}"


def _quote(value: object) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)
