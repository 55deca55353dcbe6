"""Property-based tests for Localizer translation.

Properties:
- Lookups never raise for keys without a pattern
- Region languages resolve every base key, preferring region patterns
- Repeated translation compiles each pattern at most once per generation
- pairs_to_params keeps exactly the complete name/value pairs

Python 3.13+.
"""

from __future__ import annotations

from hypothesis import event, given
from hypothesis import strategies as st

from applocalize import Localizer
from applocalize.localization.translator import pairs_to_params
from tests.helpers.doubles import CountingFormatter
from tests.strategies import (
    language_codes,
    message_keys,
    param_names,
    resource_bundles,
)


class TestMissingKeys:
    """Missing keys resolve to "", the key, or None; never an exception."""

    @given(language_codes(), message_keys(), st.booleans())
    def test_missing_key_outcome(self, language: str, key: str, echo: bool) -> None:
        """Outcome depends only on bundle presence and the echo flag."""
        resources = {language.split("-")[0]: {}}
        l10n = Localizer(language=language, resources=resources, use_key_if_missing=echo)

        result = l10n.localize(key)

        event(f"echo={echo}")
        assert result == (key if echo else "")

    @given(language_codes(), message_keys())
    def test_unrelated_language_returns_none(self, language: str, key: str) -> None:
        """No bundle for the language or its base gives None."""
        l10n = Localizer(language=language, resources={"qq": {key: "x"}})
        assert l10n.localize(key) is None


class TestRegionFallback:
    """Region languages fall back key-by-key to the base bundle."""

    @given(resource_bundles())
    def test_every_base_key_resolves(self, bundle: dict[str, dict[str, str]]) -> None:
        """Region pattern if present, base pattern otherwise."""
        base, region = sorted(bundle, key=len)
        l10n = Localizer(language=region, resources=bundle)

        for key, base_pattern in bundle[base].items():
            expected = bundle[region].get(key, base_pattern)
            assert l10n.localize(key) == expected

    @given(resource_bundles())
    def test_compiles_at_most_once_per_key(self, bundle: dict[str, dict[str, str]]) -> None:
        """Second pass over all keys is served from the cache."""
        base, region = sorted(bundle, key=len)
        formatter = CountingFormatter()
        l10n = Localizer(language=region, resources=bundle, formatter=formatter)

        for _ in range(2):
            for key in bundle[base]:
                l10n.localize(key)

        assert formatter.compile_count == len(bundle[base])


class TestPairsToParams:
    """Alternating name/value positionals."""

    @given(st.lists(st.tuples(param_names(), st.integers()), max_size=6), st.booleans())
    def test_complete_pairs_kept(self, pairs: list[tuple[str, int]], dangling: bool) -> None:
        flat: list[object] = [item for pair in pairs for item in pair]
        if dangling:
            flat.append("orphan")
        event(f"dangling={dangling}")

        params = pairs_to_params(flat)

        assert params == dict(pairs)
