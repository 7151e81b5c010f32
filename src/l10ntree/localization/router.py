"""Namespace routing: the public entry point of l10ntree.

Localization maps the first segment of a dotted key to a registered package
and hands the rest of the key to that package's locale chain. Whatever the
chain cannot resolve is rendered as a diagnostic fallback so callers always
get text back.

Thread Safety:
    Registrations are serialized by a lock; lookups read the registry
    without locking (a dict read sees either the old or the new package).

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping

from l10ntree.constants import KEY_SEPARATOR
from l10ntree.localization.fallback import FallbackInfo, format_fallback
from l10ntree.localization.keys import guard_key_path, split_key
from l10ntree.localization.package import PackageLocalization
from l10ntree.localization.tree import CacheTree
from l10ntree.localization.types import LocaleCode, PackageName, TemplateStore
from l10ntree.runtime import FormatValue
from l10ntree.syntax import Message

__all__ = ["Localization"]

logger = logging.getLogger(__name__)


class Localization:
    """Packages of ICU message templates with locale fallback.

    Keys have the form ``<package>.<path>``, where the path descends into the
    package's nested template store. Locales are tried in the order given to
    the constructor.

    Example:
        >>> l10n = Localization(["fr", "en"])
        >>> _ = l10n.add_package(
        ...     "ui",
        ...     {
        ...         "en": {"greeting": "Hello, {name}!", "bye": "Bye"},
        ...         "fr": {"greeting": "Bonjour, {name} !"},
        ...     },
        ... )
        >>> l10n.format_value("ui.greeting", {"name": "Sam"})
        'Bonjour, Sam !'
        >>> l10n.format_value("ui.bye")
        'Bye'
        >>> l10n.format_value("ui.missing", {"name": "Sam"})
        'ui.missing: { "name": "Sam" }'
    """

    __slots__ = ("_lock", "_locales", "_on_fallback", "_packages")

    def __init__(
        self,
        locales: Iterable[LocaleCode],
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            locales: Locale codes in fallback order (e.g., ['lv', 'en'])
            on_fallback: Optional callback invoked when a message resolves
                from a locale other than the first one

        Raises:
            ValueError: If locales is empty or a locale code is blank or
                padded with whitespace
        """
        locale_list = list(locales)
        if not locale_list:
            msg = "At least one locale is required"
            raise ValueError(msg)
        for locale in locale_list:
            if not locale or locale != locale.strip():
                msg = f"Invalid locale code {locale!r}"
                raise ValueError(msg)

        # dict.fromkeys() removes duplicates while maintaining insertion order
        self._locales: tuple[LocaleCode, ...] = tuple(dict.fromkeys(locale_list))
        self._on_fallback = on_fallback
        self._packages: dict[PackageName, PackageLocalization] = {}
        self._lock = threading.Lock()

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Locale codes in fallback order."""
        return self._locales

    @property
    def packages(self) -> tuple[PackageName, ...]:
        """Names of registered packages in registration order."""
        return tuple(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __repr__(self) -> str:
        return f"Localization(locales={self._locales!r}, packages={len(self._packages)})"

    def add_package(
        self,
        name: PackageName,
        strings: Mapping[LocaleCode, TemplateStore],
        parsed: Mapping[LocaleCode, CacheTree[Message]] | None = None,
    ) -> PackageLocalization:
        """Register the templates of a package.

        A package registered again under the same name replaces the previous
        one, caches included. To carry parsed messages over, pass the old
        package's ``parsed_caches`` as ``parsed``.

        Args:
            name: Package name; non-empty and free of the key separator
            strings: Template store per locale, kept by reference
            parsed: Prebuilt parsed-message trees per locale

        Returns:
            The new PackageLocalization

        Raises:
            ValueError: If the name is empty or contains the key separator
            KeyPollutionError: If the name is the reserved sentinel
            TypeError: If a prebuilt parsed cache is not a CacheTree
        """
        if not name or KEY_SEPARATOR in name:
            msg = f"Package name must be non-empty and must not contain '{KEY_SEPARATOR}'"
            raise ValueError(msg)
        guard_key_path((name,))

        package = PackageLocalization(
            name, self._locales, strings, parsed, on_fallback=self._on_fallback
        )
        with self._lock:
            replaced = name in self._packages
            self._packages[name] = package
        logger.info(
            "%s package '%s' for locales %s",
            "Replaced" if replaced else "Registered",
            name,
            ", ".join(locale for locale in self._locales if locale in strings),
        )
        return package

    def get_package(self, name: PackageName) -> PackageLocalization | None:
        """Registered package by name, or None."""
        return self._packages.get(name)

    def format_value(self, key: str, args: Mapping[str, FormatValue] | None = None) -> str:
        """Render ``key`` or its diagnostic fallback.

        Args:
            key: ``<package>.<path>`` lookup key
            args: Message arguments

        Returns:
            The rendered message from the first locale that has it, else
            the key itself (no args) or ``key: { "arg": "value", ... }``

        Raises:
            KeyPollutionError: If any key segment is the reserved sentinel
            MessageSyntaxError: If the resolving template is malformed
            MessageFormatError: If ``args`` cannot satisfy the message
        """
        path = split_key(key)
        if len(path) > 1:
            package = self._packages.get(path[0])
            if package is not None:
                value = package.format_value(path[1:], args)
                if value is not None:
                    return value
        logger.debug("No message for '%s', using fallback", key)
        return format_fallback(key, args)

    def has_message(self, key: str) -> bool:
        """Check whether some locale holds a template for ``key``.

        Reads the template stores only; nothing is parsed or cached.
        """
        path = split_key(key)
        if len(path) < 2:
            return False
        package = self._packages.get(path[0])
        return package is not None and package.has_message(path[1:])
