"""Deep merge of resource bundles.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

__all__ = ["deep_merge"]


def deep_merge(base: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Merge incoming into a copy of base, recursing into nested mappings.

    Neither argument is mutated. Rules at every level:
        - keys present on one side only are kept
        - two mappings under the same key are merged recursively
        - otherwise the incoming value replaces the base value

    Nested mappings taken from either side are copied, so the result shares
    no mutable containers with its inputs.

    Example:
        >>> deep_merge({"en": {"hi": "hi"}}, {"es": {"hi": "hola"}})
        {'en': {'hi': 'hi'}, 'es': {'hi': 'hola'}}
        >>> deep_merge({"en": {"a": "1", "b": "2"}}, {"en": {"b": "3"}})
        {'en': {'a': '1', 'b': '3'}}
    """
    merged: dict[str, Any] = {key: _copy(value) for key, value in base.items()}
    for key, value in incoming.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy(value)
    return merged


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy(item) for key, item in value.items()}
    return value
