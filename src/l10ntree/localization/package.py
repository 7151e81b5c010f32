"""Multi-locale resolution for one package.

PackageLocalization holds one LocaleMessages per configured locale and asks
them in priority order. It never formats a fallback itself: a key that no
locale holds yields None, and the router decides what to show.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from l10ntree.localization.engine import LocaleMessages
from l10ntree.localization.fallback import FallbackInfo
from l10ntree.localization.keys import split_key
from l10ntree.localization.tree import CacheTree
from l10ntree.localization.types import KeyPath, LocaleCode, PackageName, TemplateStore
from l10ntree.runtime import FormatValue
from l10ntree.syntax import Message

__all__ = ["PackageLocalization"]

logger = logging.getLogger(__name__)

_EMPTY_STORE: TemplateStore = {}


class PackageLocalization:
    """Locale fallback chain for the strings of one package.

    Locales are tried strictly in the configured order. Every configured
    locale gets an engine; a locale the package ships no strings for simply
    never resolves anything.

    Example:
        >>> pkg = PackageLocalization(
        ...     "ui",
        ...     ["lv", "en"],
        ...     {"en": {"save": "Save"}, "lv": {"open": "Atvērt"}},
        ... )
        >>> pkg.format_value(("open",))
        'Atvērt'
        >>> pkg.format_value(("save",))
        'Save'
        >>> pkg.format_value(("close",)) is None
        True
    """

    __slots__ = ("_engines", "_locales", "_name", "_on_fallback")

    def __init__(
        self,
        name: PackageName,
        locales: Iterable[LocaleCode],
        strings: Mapping[LocaleCode, TemplateStore],
        parsed: Mapping[LocaleCode, CacheTree[Message]] | None = None,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize the package.

        Args:
            name: Package name (first segment of router keys)
            locales: Locale codes in priority order
            strings: Template store per locale; each store is kept by
                reference so later additions become visible
            parsed: Prebuilt parsed-message trees per locale, adopted as-is
            on_fallback: Called when a message resolves from a locale other
                than the first one

        Raises:
            ValueError: If locales is empty
            TypeError: If a prebuilt parsed cache is not a CacheTree
        """
        self._name = name
        self._locales: tuple[LocaleCode, ...] = tuple(dict.fromkeys(locales))
        if not self._locales:
            msg = "At least one locale is required"
            raise ValueError(msg)
        self._on_fallback = on_fallback

        parsed = parsed or {}
        for locale, tree in parsed.items():
            if not isinstance(tree, CacheTree):
                msg = (
                    f"Prebuilt parsed cache for locale '{locale}' must be a CacheTree, "
                    f"got {type(tree).__name__}"
                )
                raise TypeError(msg)

        ignored = [locale for locale in strings if locale not in self._locales]
        if ignored:
            logger.debug("Package '%s': ignoring unconfigured locales %s", name, ignored)

        self._engines: tuple[LocaleMessages, ...] = tuple(
            LocaleMessages(locale, strings.get(locale, _EMPTY_STORE), parsed.get(locale))
            for locale in self._locales
        )

    @property
    def name(self) -> PackageName:
        """Package name."""
        return self._name

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Locale codes in priority order."""
        return self._locales

    @property
    def parsed_caches(self) -> dict[LocaleCode, CacheTree[Message]]:
        """Live parsed-message trees per locale.

        Pass the result as ``parsed`` to a later registration of the same
        package to skip parsing the templates again.
        """
        return {engine.locale: engine.parsed for engine in self._engines}

    def __repr__(self) -> str:
        return f"PackageLocalization(name={self._name!r}, locales={self._locales!r})"

    def format_value(
        self, key: str | KeyPath, args: Mapping[str, FormatValue] | None = None
    ) -> str | None:
        """Render ``key`` from the first locale that has it.

        Args:
            key: Dotted key or key path inside the package
            args: Message arguments

        Returns:
            Rendered text, or None if no locale holds the key

        Raises:
            KeyPollutionError: If the key contains the reserved segment
            MessageSyntaxError: If the resolving template is malformed
            MessageFormatError: If ``args`` cannot satisfy the message
        """
        path = _as_path(key)
        primary = self._locales[0]
        for engine in self._engines:
            value = engine.format_value(path, args)
            if value is None:
                continue
            if self._on_fallback is not None and engine.locale != primary:
                self._on_fallback(
                    FallbackInfo(
                        package=self._name,
                        key=path,
                        requested_locale=primary,
                        resolved_locale=engine.locale,
                    )
                )
            return value
        return None

    def has_message(self, key: str | KeyPath) -> bool:
        """Check whether any locale holds a template at ``key``."""
        return self.resolved_locale(key) is not None

    def resolved_locale(self, key: str | KeyPath) -> LocaleCode | None:
        """First locale whose store holds a template at ``key``."""
        path = _as_path(key)
        for engine in self._engines:
            if engine.has_message(path):
                return engine.locale
        return None

    def prime(self) -> int:
        """Parse every template of every locale ahead of the first lookup.

        Returns:
            Number of templates parsed

        Raises:
            MessageSyntaxError: On the first malformed template
        """
        total = sum(engine.prime() for engine in self._engines)
        logger.debug("Package '%s': primed %d templates", self._name, total)
        return total

    def cache_info(self) -> dict[LocaleCode, dict[str, int]]:
        """Cache counts per locale."""
        return {engine.locale: engine.cache_info() for engine in self._engines}


def _as_path(key: str | KeyPath) -> KeyPath:
    match key:
        case str():
            return split_key(key)
        case _:
            return tuple(key)
