"""Tests for LocaleMessages: the per-locale three-tier cache cascade.

Parser and compiler calls are counted by wrapping the functions the engine
module imported, so each test can assert exactly how often a tier was
populated.
"""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Iterator
from typing import Any

import pytest

from l10ntree.errors import KeyPollutionError, MessageSyntaxError
from l10ntree.localization import CacheTree, LocaleMessages, Vacant
from l10ntree.localization import engine as engine_module
from l10ntree.syntax import Message, parse_message


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> Iterator[Counter[str]]:
    """Count parse_message and compile_message calls made by the engine."""
    counts: Counter[str] = Counter()
    real_parse = engine_module.parse_message
    real_compile = engine_module.compile_message

    def counting_parse(source: str) -> Message:
        counts["parse"] += 1
        return real_parse(source)

    def counting_compile(message: Message, locale: str) -> Any:
        counts["compile"] += 1
        return real_compile(message, locale)

    monkeypatch.setattr(engine_module, "parse_message", counting_parse)
    monkeypatch.setattr(engine_module, "compile_message", counting_compile)
    yield counts


class TestLookup:
    """Hits and misses."""

    def test_hit_renders_with_args(self) -> None:
        """A template at the path renders with the given arguments."""
        messages = LocaleMessages("en", {"menu": {"open": "Open {file}"}})
        assert messages.format_value(("menu", "open"), {"file": "a.txt"}) == "Open a.txt"

    def test_miss_returns_none(self) -> None:
        """Unknown paths are misses, not errors."""
        messages = LocaleMessages("en", {"menu": {"open": "Open"}})
        assert messages.format_value(("menu", "close"), None) is None
        assert messages.format_value(("nothing",), None) is None

    def test_empty_rendering_is_a_hit(self) -> None:
        """An empty template renders '' rather than signalling a miss."""
        messages = LocaleMessages("en", {"blank": ""})
        assert messages.format_value(("blank",), None) == ""

    def test_non_string_leaf_is_a_miss(self) -> None:
        """Values that are neither strings nor mappings never resolve."""
        messages = LocaleMessages("en", {"count": 3})  # type: ignore[dict-item]
        assert messages.format_value(("count",), None) is None

    def test_repr_and_locale(self) -> None:
        """repr() reports cache sizes."""
        messages = LocaleMessages("lv", {"a": "A"})
        messages.format_value(("a",), None)
        assert messages.locale == "lv"
        assert repr(messages) == "LocaleMessages(locale='lv', parsed=1, formatters=1)"


class TestCaching:
    """Lazy population of the parsed and formatter tiers."""

    def test_parse_and_compile_once_per_path(self, calls: Counter[str]) -> None:
        """Repeated lookups reuse the cached formatter."""
        messages = LocaleMessages("en", {"greet": "Hi {name}"})
        results = [messages.format_value(("greet",), {"name": n}) for n in ("A", "B", "C")]
        assert results == ["Hi A", "Hi B", "Hi C"]
        assert calls == Counter({"parse": 1, "compile": 1})
        assert messages.cache_info() == {"parsed": 1, "formatters": 1}

    def test_miss_populates_nothing(self, calls: Counter[str]) -> None:
        """A total miss neither parses nor writes to any tier."""
        messages = LocaleMessages("en", {"a": {"b": "x"}})
        assert messages.format_value(("a", "z"), None) is None
        assert calls == Counter()
        assert messages.cache_info() == {"parsed": 0, "formatters": 0}

    def test_no_negative_caching(self) -> None:
        """Strings added to the caller's store after a miss are found."""
        strings: dict[str, Any] = {"a": "A"}
        messages = LocaleMessages("en", strings)
        assert messages.format_value(("b",), None) is None
        strings["b"] = "B"
        assert messages.format_value(("b",), None) == "B"

    def test_miss_under_prefix_leaves_prefix_free(self) -> None:
        """Missing 'x.y' does not stop a later string at 'x' from resolving."""
        strings: dict[str, Any] = {}
        messages = LocaleMessages("en", strings)
        assert messages.format_value(("x", "y"), None) is None
        strings["x"] = "X"
        assert messages.format_value(("x",), None) == "X"

    def test_adopted_parsed_cache_skips_parsing(self, calls: Counter[str]) -> None:
        """A prebuilt parsed tree is used as-is; only compilation runs."""
        parsed: CacheTree[Message] = CacheTree()
        probe = parsed.probe(("greet",))
        assert isinstance(probe, Vacant)
        parsed.fill(probe, parse_message("Hi {name}"))

        messages = LocaleMessages("en", {}, parsed)
        assert messages.format_value(("greet",), {"name": "Sam"}) == "Hi Sam"
        assert calls == Counter({"compile": 1})
        assert messages.parsed is parsed


class TestPathShape:
    """Mismatches between key paths and store shape."""

    def test_string_before_end_is_a_miss(self) -> None:
        """'a.b' holds a string, so 'a.b.c' cannot resolve."""
        messages = LocaleMessages("en", {"a": {"b": "s"}})
        assert messages.format_value(("a", "b", "c"), None) is None

    def test_mapping_at_end_is_a_miss(self) -> None:
        """'a' names a mapping, not a template."""
        messages = LocaleMessages("en", {"a": {"b": "s"}})
        assert messages.format_value(("a",), None) is None

    def test_cached_leaf_blocks_deeper_paths(self) -> None:
        """Once 'a.b' is cached, 'a.b.c' is a miss without a store walk."""
        messages = LocaleMessages("en", {"a": {"b": "s"}})
        assert messages.format_value(("a", "b"), None) == "s"
        assert messages.format_value(("a", "b", "c"), None) is None
        assert messages.format_value(("a",), None) is None


class TestErrors:
    """Errors propagate and leave no cache entries behind."""

    def test_pollution_guard(self) -> None:
        """A reserved segment raises before any cache access."""
        messages = LocaleMessages("en", {"x": "X"})
        with pytest.raises(KeyPollutionError):
            messages.format_value(("__proto__", "x"), None)
        with pytest.raises(KeyPollutionError):
            messages.has_message(("a", "__proto__"))
        assert messages.cache_info() == {"parsed": 0, "formatters": 0}

    def test_syntax_error_leaves_path_uncached(self) -> None:
        """Fixing a broken template makes the path resolve."""
        strings: dict[str, Any] = {"bad": "{oops"}
        messages = LocaleMessages("en", strings)
        with pytest.raises(MessageSyntaxError):
            messages.format_value(("bad",), None)
        assert messages.cache_info() == {"parsed": 0, "formatters": 0}
        strings["bad"] = "fixed"
        assert messages.format_value(("bad",), None) == "fixed"


class TestPrimeAndIntrospection:
    """prime(), has_message() and cache_info()."""

    def test_prime_parses_every_template_once(self, calls: Counter[str]) -> None:
        """prime() fills the parsed tier and skips already parsed paths."""
        messages = LocaleMessages("en", {"a": "A", "b": {"c": "C", "d": {"e": "E"}}})
        assert messages.prime() == 3
        assert messages.prime() == 0
        assert calls == Counter({"parse": 3})
        assert messages.cache_info() == {"parsed": 3, "formatters": 0}
        assert messages.format_value(("b", "d", "e"), None) == "E"
        assert calls == Counter({"parse": 3, "compile": 1})

    def test_prime_propagates_syntax_errors(self) -> None:
        """A malformed template fails prime()."""
        with pytest.raises(MessageSyntaxError):
            LocaleMessages("en", {"bad": "}"}).prime()

    def test_has_message_reads_store_only(self, calls: Counter[str]) -> None:
        """has_message() never parses."""
        messages = LocaleMessages("en", {"a": {"b": "s"}})
        assert messages.has_message(("a", "b"))
        assert not messages.has_message(("a",))
        assert not messages.has_message(("a", "b", "c"))
        assert calls == Counter()


class TestConcurrency:
    """Concurrent lookups on one engine."""

    def test_concurrent_lookups_compile_once(self, calls: Counter[str]) -> None:
        """Racing threads share one parsed message and one formatter."""
        messages = LocaleMessages(
            "en", {"files": "{n, plural, one {# file} other {# files}}"}
        )
        barrier = threading.Barrier(8)
        results: list[str | None] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            for n in range(50):
                value = messages.format_value(("files",), {"n": n})
                with lock:
                    results.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 400
        assert results.count("1 file") == 8
        assert calls == Counter({"parse": 1, "compile": 1})
