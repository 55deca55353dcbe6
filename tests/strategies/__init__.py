"""Hypothesis strategies for applocalize property-based testing.

Usage:
    from tests.strategies.localization import language_codes, resource_bundles
"""

from .localization import (
    base_languages,
    language_codes,
    message_keys,
    param_names,
    region_languages,
    resource_bundles,
    safe_patterns,
)

__all__ = [
    "base_languages",
    "language_codes",
    "message_keys",
    "param_names",
    "region_languages",
    "resource_bundles",
    "safe_patterns",
]
