"""Locale code helpers shared by the formatter and plural rules.

Callers may spell locales BCP-47 style ("pt-BR") or POSIX style ("pt_BR");
Babel wants the latter. Everything that talks to Babel goes through
normalize_locale first so both spellings hit the same cache entries.

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "clear_locale_cache",
    "get_babel_locale",
    "normalize_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Return the POSIX spelling Babel expects.

    Example:
        >>> normalize_locale("pt-BR")
        'pt_BR'
        >>> normalize_locale(" lv ")
        'lv'
    """
    return locale_code.strip().replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Parse a locale code into a Babel Locale, memoized per code.

    Plural selection runs on every plural render, so the parse is cached.
    Failures are not cached and re-raise on the next call.

    Raises:
        babel.UnknownLocaleError: No CLDR data for the locale
        ValueError: Malformed locale code

    Example:
        >>> get_babel_locale("lv-LV").territory
        'LV'
    """
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def clear_locale_cache() -> None:
    """Drop every memoized Babel Locale (used by tests)."""
    get_babel_locale.cache_clear()
