"""Localizer Example - Region Fallback and Resource Loading.

Scenarios covered:
1. Region language falling back to its base language key by key
2. Observing fallbacks with on_fallback
3. Loading JSON resources from disk with a PathResourceFetcher scope
4. Load events, error reporting and retry

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
import logging
import tempfile
from functools import partial
from pathlib import Path

from applocalize import Localizer, LocalizeEvent, PathResourceFetcher
from applocalize.localization import FallbackInfo


def example_1_region_fallback() -> None:
    """Example 1: en-GB falls back to en for keys it does not define."""
    print("=" * 60)
    print("Example 1: Region fallback (en-GB -> en)")
    print("=" * 60)

    l10n = Localizer(
        language="en-GB",
        resources={
            "en": {"color": "Color", "cart": "Cart", "checkout": "Checkout"},
            "en-GB": {"color": "Colour", "cart": "Basket"},
        },
    )
    for key in ("color", "cart", "checkout"):
        print(f"  {key}: {l10n.localize(key)}")


def example_2_on_fallback() -> None:
    """Example 2: Reporting keys resolved from the base language."""
    print("\n" + "=" * 60)
    print("Example 2: on_fallback")
    print("=" * 60)

    def report(info: FallbackInfo) -> None:
        print(f"  [fallback] {info.key}: {info.requested_language} -> {info.resolved_language}")

    l10n = Localizer(
        language="lv-LV",
        resources={"lv": {"hello": "Sveiki!"}},
        on_fallback=report,
    )
    print(f"  hello: {l10n.localize('hello')}")


async def example_3_load_from_disk(locales_dir: Path) -> None:
    """Example 3: A Localizer subclass reading JSON files from a directory."""
    print("\n" + "=" * 60)
    print("Example 3: Loading resources")
    print("=" * 60)

    class DiskLocalizer(Localizer):
        fetcher_factory = partial(PathResourceFetcher, locales_dir)

    l10n = DiskLocalizer(language="lv", resources={"en": {"hello": "Hello!"}})

    @l10n.on_resources_loaded
    def loaded(event: LocalizeEvent) -> None:
        print(f"  loaded {event.detail.url if event.detail else '?'}")

    @l10n.on_resources_error
    def failed(event: LocalizeEvent) -> None:
        print("  load failed")

    # Both calls share one read of lv.json
    await asyncio.gather(
        l10n.load_resources("lv.json", language="lv"),
        l10n.load_resources("lv.json", language="lv"),
    )
    print(f"  languages: {l10n.languages}")
    print(f"  hello: {l10n.localize('hello')}")

    result = await l10n.load_resources("de.json", language="de")
    print(f"  de.json: {result.status}")

    # Failed requests are remembered; forget it to retry once the file exists
    (locales_dir / "de.json").write_text(json.dumps({"hello": "Hallo!"}), encoding="utf-8")
    DiskLocalizer.localization_cache().forget_request("de.json")
    result = await l10n.load_resources("de.json", language="de")
    print(f"  de.json retry: {result.status}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    example_1_region_fallback()
    example_2_on_fallback()
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "lv.json").write_text(json.dumps({"hello": "Sveiki!"}), encoding="utf-8")
        asyncio.run(example_3_load_from_disk(root))
