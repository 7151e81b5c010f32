"""Per-locale message resolution with lazy, layered caching.

LocaleMessages owns the strings of one package in one locale and answers
lookups through a three-tier cascade, each tier filling the one above it:

    formatter tree  ->  parsed-message tree  ->  template store
    (compiled)          (parse_message)          (caller's raw strings)

1. Formatter tier: a cached formatter at the key path is a hit with no
   parsing or compilation.
2. Parsed tier: a cached Message is compiled for this locale and the
   formatter stored.
3. Template tier: a raw string is parsed and the Message stored.

A miss at every tier writes nothing, so a string the caller adds to the
store later is picked up by the next lookup. Misses are never cached.

Thread Safety:
    One lock per instance covers the whole walk-and-fill of a lookup.
    Rendering runs outside the lock; formatters are immutable.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping

from l10ntree.localization.keys import guard_key_path
from l10ntree.localization.tree import Blocked, CacheTree, Found, Vacant
from l10ntree.localization.types import KeyPath, LocaleCode, TemplateNode, TemplateStore
from l10ntree.runtime import FormatValue, MessageFormatter, compile_message
from l10ntree.syntax import Message, parse_message

__all__ = ["LocaleMessages"]

logger = logging.getLogger(__name__)


class LocaleMessages:
    """Messages of one package in one locale.

    Example:
        >>> messages = LocaleMessages("en", {"menu": {"open": "Open {file}"}})
        >>> messages.format_value(("menu", "open"), {"file": "a.txt"})
        'Open a.txt'
        >>> messages.format_value(("menu", "close"), {}) is None
        True
    """

    __slots__ = ("_formatters", "_locale", "_lock", "_parsed", "_strings")

    def __init__(
        self,
        locale: LocaleCode,
        strings: TemplateStore,
        parsed: CacheTree[Message] | None = None,
    ) -> None:
        """Initialize single-locale messages.

        Args:
            locale: Locale code the formatters are compiled for
            strings: Template store; kept by reference and never mutated
            parsed: Parsed-message tree to adopt (shared, not copied)
        """
        self._locale = locale
        self._strings = strings
        self._parsed: CacheTree[Message] = parsed if parsed is not None else CacheTree()
        self._formatters: CacheTree[MessageFormatter] = CacheTree()
        self._lock = threading.Lock()

    @property
    def locale(self) -> LocaleCode:
        """Locale code of these messages."""
        return self._locale

    @property
    def parsed(self) -> CacheTree[Message]:
        """Live parsed-message tree (reusable as a prebuilt cache)."""
        return self._parsed

    def __repr__(self) -> str:
        return (
            f"LocaleMessages(locale={self._locale!r}, parsed={len(self._parsed)}, "
            f"formatters={len(self._formatters)})"
        )

    def format_value(
        self, key: KeyPath, args: Mapping[str, FormatValue] | None = None
    ) -> str | None:
        """Render the message at ``key``, or None if this locale has none.

        Args:
            key: Key path inside the package
            args: Message arguments

        Returns:
            Rendered text (possibly empty) or None on a miss

        Raises:
            KeyPollutionError: If the key contains the reserved segment
            MessageSyntaxError: If the template at ``key`` is malformed
            MessageFormatError: If ``args`` cannot satisfy the message
        """
        guard_key_path(key)
        with self._lock:
            formatter = self._get_formatter(key)
        if formatter is None:
            return None
        return formatter.format(args)

    def has_message(self, key: KeyPath) -> bool:
        """Check whether the template store holds a string at ``key``.

        Reads the store only: nothing is parsed or cached.
        """
        guard_key_path(key)
        return self._get_string(key) is not None

    def prime(self) -> int:
        """Parse every template in the store into the parsed tree.

        Returns:
            Number of templates parsed by this call (already cached ones
            are skipped)

        Raises:
            MessageSyntaxError: On the first malformed template
        """
        count = 0
        for path, _source in _iter_templates(self._strings, ()):
            with self._lock:
                if isinstance(self._parsed.probe(path), Vacant):
                    self._get_parsed(path)
                    count += 1
        logger.debug("Primed %d templates for locale %s", count, self._locale)
        return count

    def cache_info(self) -> dict[str, int]:
        """Counts of cached parsed messages and formatters."""
        with self._lock:
            return {"parsed": len(self._parsed), "formatters": len(self._formatters)}

    def _get_formatter(self, key: KeyPath) -> MessageFormatter | None:
        match self._formatters.probe(key):
            case Found(value=formatter):
                return formatter
            case Blocked():
                return None
            case Vacant() as vacancy:
                message = self._get_parsed(key)
                if message is None:
                    return None
                formatter = compile_message(message, self._locale)
                return self._formatters.fill(vacancy, formatter)

    def _get_parsed(self, key: KeyPath) -> Message | None:
        match self._parsed.probe(key):
            case Found(value=message):
                return message
            case Blocked():
                return None
            case Vacant() as vacancy:
                source = self._get_string(key)
                if source is None:
                    return None
                message = parse_message(source)
                logger.debug("Parsed '%s' for locale %s", ".".join(key), self._locale)
                return self._parsed.fill(vacancy, message)

    def _get_string(self, key: KeyPath) -> str | None:
        node: TemplateNode = self._strings
        for segment in key:
            match node:
                case Mapping():
                    child = node.get(segment)
                    if child is None:
                        return None
                    node = child
                case _:
                    return None
        match node:
            case str():
                return node
            case _:
                return None


def _iter_templates(node: TemplateNode, prefix: KeyPath) -> Iterator[tuple[KeyPath, str]]:
    match node:
        case str():
            if prefix:
                yield prefix, node
        case Mapping():
            for segment, child in node.items():
                if isinstance(segment, str):
                    yield from _iter_templates(child, (*prefix, segment))
