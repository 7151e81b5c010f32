"""Per-locale Babel formatting state for compiled messages.

Every MessageFormatter holds one LocaleContext: the Babel Locale it renders
with plus thin wrappers over babel.numbers and babel.dates. Nothing here
touches Python's process-wide ``locale`` module, so formatters for different
locales can run side by side in any thread.

Python 3.13+. Uses Babel for i18n.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal
from threading import RLock
from typing import ClassVar

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from l10ntree.constants import DEFAULT_LOCALE, MAX_LOCALE_CACHE_SIZE
from l10ntree.enums import DateTimeStyle
from l10ntree.locale_utils import normalize_locale

__all__ = ["LocaleContext"]

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = "#,##0"


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Babel locale bound to the code a formatter was compiled for.

    Build instances with :meth:`create`, which shares one instance per
    normalized code in a bounded LRU and substitutes en_US data for codes
    Babel does not know.

    Examples:
        >>> LocaleContext.create('de-DE').format_number(1234.5)
        '1.234,5'
        >>> LocaleContext.create('xx-unknown').is_fallback
        True

    Thread Safety:
        Instances are immutable. The shared cache is guarded by an RLock.
    """

    _cache: ClassVar[OrderedDict[str, "LocaleContext"]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_code: str
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Forget every shared instance (used by tests)."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Number of shared instances currently cached."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale_code: str) -> "LocaleContext":
        """Shared context for ``locale_code``.

        Unknown or malformed codes log a warning and format with en_US
        data; ``locale_code`` still reports what the caller asked for.

        Args:
            locale_code: BCP-47 or POSIX locale identifier
        """
        key = normalize_locale(locale_code)

        with cls._cache_lock:
            cached = cls._cache.get(key)
            if cached is not None:
                cls._cache.move_to_end(key)
                return cached

        try:
            babel_locale = Locale.parse(key)
            is_fallback = False
        except (UnknownLocaleError, ValueError) as e:
            logger.warning(
                "Cannot load locale '%s' (%s). Falling back to %s", locale_code, e, DEFAULT_LOCALE
            )
            babel_locale = Locale.parse(DEFAULT_LOCALE)
            is_fallback = True

        ctx = cls(locale_code=locale_code, _babel_locale=babel_locale, is_fallback=is_fallback)

        with cls._cache_lock:
            # Another thread may have built the same context meanwhile.
            existing = cls._cache.get(key)
            if existing is not None:
                return existing
            while len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[key] = ctx
            return ctx

    @property
    def babel_locale(self) -> Locale:
        """Locale whose CLDR data is used (en_US when is_fallback)."""
        return self._babel_locale

    @property
    def plural_locale(self) -> str:
        """Identifier plural rules are selected with."""
        return str(self._babel_locale)

    def format_number(self, value: int | float | Decimal, style: str | None = None) -> str:
        """Render a number the way ``{n, number[, style]}`` asks for.

        Args:
            value: Number to render
            style: None for the locale decimal format, "integer", "percent",
                or any CLDR decimal pattern such as "#,##0.00"

        Raises:
            ValueError: If style is not a valid pattern

        Examples:
            >>> ctx = LocaleContext.create('en-US')
            >>> ctx.format_number(0.25, "percent")
            '25%'
            >>> ctx.format_number(3, "#,##0.00")
            '3.00'
        """
        locale = self._babel_locale
        match style:
            case None:
                return str(babel_numbers.format_decimal(value, locale=locale))
            case "integer":
                return str(babel_numbers.format_decimal(value, _INTEGER_PATTERN, locale=locale))
            case "percent":
                return str(babel_numbers.format_percent(value, locale=locale))
            case _:
                return str(babel_numbers.format_decimal(value, style, locale=locale))

    def format_date(self, value: date | datetime, style: DateTimeStyle) -> str:
        """Date part of ``value`` in the CLDR width ``style``.

        Example:
            >>> from datetime import date
            >>> LocaleContext.create('en-US').format_date(date(2025, 10, 27), DateTimeStyle.SHORT)
            '10/27/25'
        """
        return str(babel_dates.format_date(value, format=style, locale=self._babel_locale))

    def format_time(self, value: time | datetime, style: DateTimeStyle) -> str:
        return str(babel_dates.format_time(value, format=style, locale=self._babel_locale))

    @staticmethod
    def from_timestamp(millis: int | float | Decimal) -> datetime:
        """Aware UTC datetime from epoch milliseconds (JavaScript Date style)."""
        return datetime.fromtimestamp(float(millis) / 1000, tz=UTC)
