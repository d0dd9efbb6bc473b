"""Recursive merging of configuration mappings."""

from typing import Any


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Merge ``update`` over ``base`` without mutating either.

    Nested mappings are merged key by key; any other value in ``update``
    (scalars, lists, ``None``) replaces the one in ``base``.
    """
    result = base.copy()
    for key, value in update.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
