"""applocalize Quickstart.

Covers:
1. Inline resources and name/value parameters
2. Plurals and select
3. Named number and date formats
4. Switching language at runtime
5. Echoing missing keys during development

Python 3.13+.
"""

from __future__ import annotations

from datetime import date

from applocalize import Localizer

RESOURCES = {
    "en": {
        "hello": "Hello, {name}!",
        "files": "{count, plural, =0 {No files} one {# file} other {# files}}",
        "invite": "{host} invited you to {gender, select, female {her} male {his} other {their}} party",
        "total": "Total: {amount, number, EUR}",
        "due": "Due {when, date, long}",
    },
    "lv": {
        "hello": "Sveiki, {name}!",
        "files": "{count, plural, zero {# failu} one {# fails} other {# faili}}",
        "total": "Kopā: {amount, number, EUR}",
    },
}

FORMATS = {
    "number": {"EUR": {"style": "currency", "currency": "EUR"}},
}


def example_1_parameters() -> None:
    """Example 1: Inline resources with alternating name/value parameters."""
    print("=" * 60)
    print("Example 1: Parameters")
    print("=" * 60)

    l10n = Localizer(language="en", resources=RESOURCES, formats=FORMATS)
    print(l10n.localize("hello", "name", "Anna"))
    print(l10n.translate("hello", {"name": "Jānis"}))


def example_2_plural_select() -> None:
    """Example 2: CLDR plural categories and select."""
    print("\n" + "=" * 60)
    print("Example 2: Plurals and select")
    print("=" * 60)

    l10n = Localizer(language="en", resources=RESOURCES, formats=FORMATS)
    for count in (0, 1, 5):
        print(l10n.localize("files", "count", count))
    print(l10n.localize("invite", "host", "Anna", "gender", "female"))


def example_3_formats() -> None:
    """Example 3: Named number format and built-in date style."""
    print("\n" + "=" * 60)
    print("Example 3: Formats")
    print("=" * 60)

    l10n = Localizer(language="en", resources=RESOURCES, formats=FORMATS)
    print(l10n.localize("total", "amount", 1234.5))
    print(l10n.localize("due", "when", date(2026, 12, 24)))


def example_4_switch_language() -> None:
    """Example 4: Assigning language rebuilds the translator."""
    print("\n" + "=" * 60)
    print("Example 4: Switching language")
    print("=" * 60)

    l10n = Localizer(language="en", resources=RESOURCES, formats=FORMATS)
    print(l10n.localize("total", "amount", 1234.5))
    l10n.language = "lv"
    print(l10n.localize("total", "amount", 1234.5))
    print(l10n.localize("files", "count", 21))


def example_5_missing_keys() -> None:
    """Example 5: Missing keys are empty, or echoed with use_key_if_missing."""
    print("\n" + "=" * 60)
    print("Example 5: Missing keys")
    print("=" * 60)

    l10n = Localizer(language="lv", resources=RESOURCES)
    print(repr(l10n.localize("settings.title")))
    l10n.use_key_if_missing = True
    print(repr(l10n.localize("settings.title")))


if __name__ == "__main__":
    example_1_parameters()
    example_2_plural_select()
    example_3_formats()
    example_4_switch_language()
    example_5_missing_keys()
