"""
Merge-patch for plan documents.

Objects merge recursively, arrays merge as an order-preserving union
(existing elements keep their position, new ones are appended in patch
order), and everything else is replaced. Neither input is mutated.
"""

from __future__ import annotations

import copy
from typing import Any


def json_equal(a: Any, b: Any) -> bool:
    """
    Structural equality with JSON semantics.

    Plain `==` treats True as 1 and False as 0; JSON does not.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    if isinstance(a, list):
        if not isinstance(b, list) or len(a) != len(b):
            return False
        return all(json_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b


def _contains(items: list[Any], value: Any) -> bool:
    return any(json_equal(item, value) for item in items)


def _union(target: list[Any], additions: list[Any]) -> None:
    for item in additions:
        if not _contains(target, item):
            target.append(copy.deepcopy(item))


def _merge_into(target: dict[str, Any], patch: dict[str, Any]) -> None:
    for key, value in patch.items():
        current = target.get(key)
        if isinstance(value, dict):
            if isinstance(current, dict):
                _merge_into(current, value)
            else:
                target[key] = copy.deepcopy(value)
        elif isinstance(value, list):
            if isinstance(current, list):
                _union(current, value)
            else:
                target[key] = copy.deepcopy(value)
        else:
            target[key] = value


def merge_patch(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Return a new document with `patch` merged onto `base`."""
    if not isinstance(patch, dict):
        raise TypeError(f"patch must be a JSON object, got {type(patch).__name__}")
    if not isinstance(base, dict):
        raise TypeError(f"base must be a JSON object, got {type(base).__name__}")
    merged = copy.deepcopy(base)
    _merge_into(merged, patch)
    return merged
