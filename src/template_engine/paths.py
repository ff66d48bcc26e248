"""Dotted path traversal over JSON-shaped data."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def get_nested_value(obj: Any, path: str) -> Any:
    """
    Get nested value from an object using dot notation.

    Mappings are walked by key and sequences by integer index
    (``items.0.name``). Any missing step yields None; this never raises.

    Example:
        get_nested_value({"order": {"customer": {"email": "a@b.c"}}}, "order.customer.email")
    """
    if obj is None or not path:
        return None

    current = obj
    for key in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(key)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not key.isdigit() or int(key) >= len(current):
                return None
            current = current[int(key)]
        else:
            return None

        if current is None:
            return None

    return current


__all__ = ["get_nested_value"]
