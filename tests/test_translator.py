"""Tests for Translator resolution, fallback, caching and formatting.

Covers:
- None/"" outcomes for missing inputs, bundles and keys
- Base-language fallback ("en-US" -> "en") at bundle and key level
- use_key_if_missing echo and the shared missing-key cache prefix
- Compile-once caching keyed by (key, pattern) and invalidation on rebuild
- on_fallback notifications
- Parameter coercion (mappings, pairs, alternating positional pairs)
- MessageFormatError propagation

Python 3.13+.
"""

from __future__ import annotations

import pytest

from applocalize.constants import MISSING_KEY_SENTINEL
from applocalize.errors import MessageFormatError
from applocalize.localization.cache import LocalizationCache
from applocalize.localization.translator import (
    FallbackInfo,
    Translator,
    build_translator,
    coerce_params,
    pairs_to_params,
)
from tests.helpers.doubles import CountingFormatter

RESOURCES = {
    "en": {
        "greet": "Hello, {name}!",
        "farewell": "Goodbye",
        "only_base": "Base only",
    },
    "en-GB": {
        "farewell": "Cheerio",
    },
    "es": {
        "greet": "¡Hola, {name}!",
    },
}


def make_translator(
    language: str | None = "en",
    resources: dict | None = None,
    formatter: CountingFormatter | None = None,
    **kwargs: object,
) -> Translator:
    return build_translator(
        language,
        RESOURCES if resources is None else resources,
        {},
        cache=LocalizationCache("translator-tests"),
        formatter=formatter or CountingFormatter(),
        **kwargs,  # type: ignore[arg-type]
    )


class TestMissingInputs:
    """Lookup misses never raise."""

    def test_empty_key_returns_none(self) -> None:
        assert make_translator().translate("") is None

    def test_no_language_returns_none(self) -> None:
        assert make_translator(language=None).translate("greet") is None

    def test_no_resources_returns_none(self) -> None:
        translator = build_translator(
            "en", None, {}, cache=LocalizationCache("t"), formatter=CountingFormatter()
        )
        assert translator.translate("farewell") is None

    def test_empty_resources_returns_none(self) -> None:
        assert make_translator(resources={}).translate("farewell") is None

    def test_unknown_language_and_base_returns_none(self) -> None:
        assert make_translator(language="fr-CA").translate("greet") is None

    def test_missing_key_returns_empty_string(self) -> None:
        assert make_translator().translate("nope") == ""

    def test_empty_pattern_treated_as_missing(self) -> None:
        translator = make_translator(resources={"en": {"blank": ""}})
        assert translator.translate("blank") == ""


class TestFallback:
    """Region-qualified languages fall back to their base language."""

    def test_region_bundle_used_when_present(self) -> None:
        assert make_translator(language="en-GB").translate("farewell") == "Cheerio"

    def test_key_missing_in_region_resolves_from_base(self) -> None:
        assert make_translator(language="en-GB").translate("only_base") == "Base only"

    def test_missing_region_bundle_uses_base_bundle(self) -> None:
        assert make_translator(language="en-US").translate("farewell") == "Goodbye"

    def test_base_language_without_region_has_no_fallback(self) -> None:
        assert make_translator(language="es").translate("farewell") == ""

    def test_on_fallback_reports_resolved_language(self) -> None:
        seen: list[FallbackInfo] = []
        translator = make_translator(language="en-GB", on_fallback=seen.append)

        translator.translate("only_base")
        translator.translate("farewell")

        assert seen == [FallbackInfo("en-GB", "en", "only_base")]

    def test_on_fallback_not_called_for_missing_keys(self) -> None:
        seen: list[FallbackInfo] = []
        make_translator(language="en-GB", on_fallback=seen.append).translate("nope")
        assert seen == []


class TestKeyEcho:
    """use_key_if_missing returns the key instead of an empty string."""

    def test_missing_key_echoed(self) -> None:
        translator = make_translator(use_key_if_missing=True)
        assert translator.translate("menu.title") == "menu.title"

    def test_echoed_key_is_formatted(self) -> None:
        translator = make_translator(use_key_if_missing=True)
        assert translator("Hi {who}", "who", "Ana") == "Hi Ana"

    def test_echoed_keys_share_sentinel_prefix(self) -> None:
        cache = LocalizationCache("echo")
        translator = build_translator(
            "en", RESOURCES, {}, cache=cache, formatter=CountingFormatter(),
            use_key_if_missing=True,
        )
        translator.translate("first")
        translator.translate("second")

        assert cache.get_message(MISSING_KEY_SENTINEL, "first") is not None
        assert cache.get_message(MISSING_KEY_SENTINEL, "second") is not None

    def test_flag_read_at_call_time(self) -> None:
        translator = make_translator()
        assert translator.translate("later") == ""
        translator.use_key_if_missing = True
        assert translator.translate("later") == "later"

    def test_bundle_miss_still_returns_none(self) -> None:
        translator = make_translator(language="fr", use_key_if_missing=True)
        assert translator.translate("greet") is None


class TestCompiledMessageCache:
    """Each (key, pattern) is compiled once per Translator generation."""

    def test_repeated_translation_compiles_once(self) -> None:
        formatter = CountingFormatter()
        translator = make_translator(formatter=formatter)

        assert translator("greet", "name", "World") == "Hello, World!"
        assert translator("greet", "name", "Ana") == "Hello, Ana!"

        assert formatter.compile_count == 1

    def test_compile_receives_resolved_language(self) -> None:
        formatter = CountingFormatter()
        make_translator(language="en-US", formatter=formatter).translate("farewell")
        assert formatter.calls == [("Goodbye", "en", {})]

    def test_rebuild_clears_compiled_messages(self) -> None:
        cache = LocalizationCache("rebuild")
        formatter = CountingFormatter()
        first = build_translator("en", RESOURCES, {}, cache=cache, formatter=formatter)
        first.translate("farewell")
        assert cache.message_count == 1

        second = build_translator("es", RESOURCES, {}, cache=cache, formatter=formatter)

        assert cache.message_count == 0
        assert cache.get_stats()["invalidations"] == 2
        second.translate("greet", {"name": "Ana"})
        assert formatter.compile_count == 2

    def test_same_key_different_pattern_not_shared(self) -> None:
        cache = LocalizationCache("patterns")
        formatter = CountingFormatter()
        en = Translator("en", RESOURCES, {}, cache=cache, formatter=formatter)
        es = Translator("es", RESOURCES, {}, cache=cache, formatter=formatter)

        assert en.translate("greet", {"name": "A"}) == "Hello, A!"
        assert es.translate("greet", {"name": "A"}) == "¡Hola, A!"
        assert formatter.compile_count == 2


class TestParameters:
    """Parameters arrive as mappings, pairs or alternating positionals."""

    def test_hello_world(self) -> None:
        assert make_translator()("greet", "name", "World") == "Hello, World!"

    def test_mapping_params(self) -> None:
        assert make_translator().translate("greet", {"name": "Ana"}) == "Hello, Ana!"

    def test_pair_params(self) -> None:
        assert make_translator().translate("greet", [("name", "Ana")]) == "Hello, Ana!"

    def test_trailing_name_dropped(self) -> None:
        assert pairs_to_params(("name", "Ana", "orphan")) == {"name": "Ana"}

    def test_empty_pairs(self) -> None:
        assert pairs_to_params(()) == {}

    def test_coerce_none(self) -> None:
        assert coerce_params(None) == {}

    def test_coerce_rejects_scalars(self) -> None:
        with pytest.raises(TypeError, match="mapping or"):
            coerce_params(42)  # type: ignore[arg-type]


class TestFormatErrors:
    """Malformed patterns and bad arguments raise MessageFormatError."""

    def test_missing_argument(self) -> None:
        with pytest.raises(MessageFormatError, match="name"):
            make_translator().translate("greet")

    def test_malformed_pattern(self) -> None:
        translator = make_translator(resources={"en": {"bad": "Hello {name"}})
        with pytest.raises(MessageFormatError):
            translator.translate("bad", {"name": "x"})

    def test_non_string_pattern(self) -> None:
        translator = make_translator(resources={"en": {"nested": {"a": "b"}}})
        with pytest.raises(MessageFormatError, match="must be a string"):
            translator.translate("nested")
