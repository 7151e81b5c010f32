"""Tests for Localization: namespace routing and the diagnostic fallback.

Includes the end-to-end scenarios for locale fallback order, negative
caching, path-shape mismatch, the pollution guard, and package dispatch.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from l10ntree import (
    FallbackInfo,
    KeyPollutionError,
    Localization,
    MessageFormatError,
    MessageSyntaxError,
    PackageLocalization,
)
from l10ntree.localization import engine as engine_module


class TestConstruction:
    """Localization constructor validation."""

    def test_locales_deduplicated_in_order(self) -> None:
        """Duplicate locales keep their first position."""
        assert Localization(["lv", "en", "lv"]).locales == ("lv", "en")

    def test_empty_locales_rejected(self) -> None:
        """At least one locale is required."""
        with pytest.raises(ValueError, match="At least one locale"):
            Localization([])

    @pytest.mark.parametrize("code", ["", " en", "en "])
    def test_blank_or_padded_locale_rejected(self, code: str) -> None:
        """Locale codes must be non-empty and unpadded."""
        with pytest.raises(ValueError, match="Invalid locale code"):
            Localization([code])


class TestPackageRegistry:
    """add_package and registry queries."""

    def test_add_package_returns_resolver(self, caplog: pytest.LogCaptureFixture) -> None:
        """Registration returns the new PackageLocalization and logs it."""
        l10n = Localization(["en"])
        with caplog.at_level(logging.INFO, logger="l10ntree.localization.router"):
            pkg = l10n.add_package("ui", {"en": {"a": "A"}})
        assert isinstance(pkg, PackageLocalization)
        assert l10n.get_package("ui") is pkg
        assert "ui" in l10n
        assert l10n.packages == ("ui",)
        assert "Registered package 'ui'" in caplog.text

    def test_last_registration_wins(self) -> None:
        """Re-registering a name replaces the package and its caches."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"a": "old"}})
        assert l10n.format_value("ui.a") == "old"
        l10n.add_package("ui", {"en": {"a": "new"}})
        assert l10n.format_value("ui.a") == "new"
        assert l10n.packages == ("ui",)

    @pytest.mark.parametrize("name", ["", "a.b"])
    def test_invalid_package_name(self, name: str) -> None:
        """Package names must be non-empty and contain no separator."""
        with pytest.raises(ValueError, match="Package name"):
            Localization(["en"]).add_package(name, {})

    def test_reserved_package_name(self) -> None:
        """The reserved segment cannot be a package name."""
        with pytest.raises(KeyPollutionError):
            Localization(["en"]).add_package("__proto__", {})

    def test_unknown_package(self) -> None:
        """get_package() returns None for unregistered names."""
        l10n = Localization(["en"])
        assert l10n.get_package("nope") is None
        assert "nope" not in l10n

    def test_repr(self) -> None:
        """repr() shows locales and package count."""
        l10n = Localization(["en", "fr"])
        l10n.add_package("ui", {})
        assert repr(l10n) == "Localization(locales=('en', 'fr'), packages=1)"


class TestResolve:
    """format_value end to end."""

    def test_package_dispatch(self) -> None:
        """'ui.greeting' routes to the 'ui' package."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"greeting": "Hello, {name}!"}})
        assert l10n.format_value("ui.greeting", {"name": "Sam"}) == "Hello, Sam!"

    def test_only_first_dot_splits_package(self) -> None:
        """The remainder of the key descends into the package store."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"settings": {"title": "Settings"}}})
        assert l10n.format_value("ui.settings.title") == "Settings"

    def test_locale_fallback_order(self) -> None:
        """With locales [en, fr], a key only under fr renders the fr text."""
        l10n = Localization(["en", "fr"])
        l10n.add_package("ui", {"en": {}, "fr": {"bye": "Au revoir"}})
        assert l10n.format_value("ui.bye") == "Au revoir"

    def test_no_negative_caching(self) -> None:
        """A string added after a miss is found by the next lookup."""
        en: dict[str, Any] = {}
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": en})
        assert l10n.format_value("ui.late") == "ui.late"
        en["late"] = "Here now"
        assert l10n.format_value("ui.late") == "Here now"

    def test_path_shape_mismatch(self) -> None:
        """'a.b' is a string, so 'a.b.c' falls back."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"a": {"b": "s"}}})
        assert l10n.format_value("ui.a.b.c") == "ui.a.b.c"
        assert l10n.format_value("ui.a.b") == "s"

    def test_pollution_guard_leaves_store_untouched(self) -> None:
        """'__proto__.x' raises and nothing is cached or written."""
        strings: dict[str, Any] = {"en": {"x": "X"}}
        l10n = Localization(["en"])
        pkg = l10n.add_package("ui", strings)
        for key in ("__proto__.x", "ui.__proto__", "ui.a.__proto__.b"):
            with pytest.raises(KeyPollutionError):
                l10n.format_value(key)
        assert strings == {"en": {"x": "X"}}
        assert pkg.cache_info() == {"en": {"parsed": 0, "formatters": 0}}

    def test_empty_rendering_is_returned(self) -> None:
        """An empty message is a hit, not a fallback trigger."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"blank": ""}})
        assert l10n.format_value("ui.blank", {"x": 1}) == ""

    def test_errors_propagate(self) -> None:
        """Syntax and argument errors reach the caller."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"bad": "{", "greet": "Hi {name}"}})
        with pytest.raises(MessageSyntaxError):
            l10n.format_value("ui.bad")
        with pytest.raises(MessageFormatError):
            l10n.format_value("ui.greet")

    def test_on_fallback_callback(self) -> None:
        """The router passes its callback to every package."""
        seen: list[FallbackInfo] = []
        l10n = Localization(["lv", "en"], on_fallback=seen.append)
        l10n.add_package("ui", {"en": {"save": "Save"}})
        assert l10n.format_value("ui.save") == "Save"
        assert [(info.package, info.resolved_locale) for info in seen] == [("ui", "en")]

    def test_cached_after_first_lookup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Repeated lookups parse and compile once per package, locale and path."""
        counts: Counter[str] = Counter()
        real_parse = engine_module.parse_message

        def counting_parse(source: str) -> Any:
            counts[source] += 1
            return real_parse(source)

        monkeypatch.setattr(engine_module, "parse_message", counting_parse)
        l10n = Localization(["en", "fr"])
        l10n.add_package("ui", {"en": {"a": "A"}, "fr": {"a": "A-fr", "b": "B-fr"}})
        for _ in range(3):
            l10n.format_value("ui.a")
            l10n.format_value("ui.b")
        assert counts == Counter({"A": 1, "B-fr": 1})


class TestFallback:
    """Diagnostic fallback rendering."""

    @pytest.fixture
    def l10n(self) -> Localization:
        """Router with one small package."""
        l10n = Localization(["en"])
        l10n.add_package("ui", {"en": {"a": "A"}})
        return l10n

    def test_key_without_separator(self, l10n: Localization) -> None:
        """Keys without '.' go straight to the fallback."""
        assert l10n.format_value("ui") == "ui"

    def test_unknown_package(self, l10n: Localization) -> None:
        """Unregistered packages fall back with the full key."""
        assert l10n.format_value("missing.key") == "missing.key"

    def test_fallback_with_args(self, l10n: Localization) -> None:
        """Arguments are appended as JSON pairs."""
        assert (
            l10n.format_value("missing.key", {"name": "Sam"}) == 'missing.key: { "name": "Sam" }'
        )

    def test_fallback_logs_debug(
        self, l10n: Localization, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Fallbacks are logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="l10ntree.localization.router"):
            l10n.format_value("ui.nope")
        assert "ui.nope" in caplog.text

    @given(st.text(alphabet="abcxyz.", max_size=12))
    def test_unresolved_keys_render_verbatim(self, key: str) -> None:
        """Any key that resolves nothing renders as itself without args."""
        l10n = Localization(["en"])
        assert l10n.format_value(key) == key


class TestHasMessage:
    """Localization.has_message."""

    def test_has_message(self) -> None:
        """True only for keys some locale holds a template for."""
        l10n = Localization(["en", "fr"])
        l10n.add_package("ui", {"fr": {"a": {"b": "x"}}})
        assert l10n.has_message("ui.a.b")
        assert not l10n.has_message("ui.a")
        assert not l10n.has_message("ui")
        assert not l10n.has_message("other.a.b")
