"""
Execution Context - Per-run key/value store threaded through node calls.

Nodes read the context and write their results into it under saveAs.
ExecutionContext behaves like a dict, and additionally:

- counts writes (``version``) so a runner can tell whether a node changed it;
- ``snapshot()`` returns an independent deep copy for a branch to own;
- ``merge(*others)`` deep-merges branch contexts back together.

Plain dicts work everywhere an ExecutionContext does.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Iterator, Optional

from template_engine import build_execution_context


def deep_merge(base: Any, incoming: Any) -> Any:
    """
    Merge incoming into base without mutating either.

    Mappings merge key by key; any other value in incoming replaces base.
    """
    if isinstance(base, Mapping) and isinstance(incoming, Mapping):
        merged = {key: copy.deepcopy(value) for key, value in base.items()}
        for key, value in incoming.items():
            merged[key] = deep_merge(base[key], value) if key in base else copy.deepcopy(value)
        return merged
    return copy.deepcopy(incoming)


class ExecutionContext(MutableMapping):
    """Versioned mutable mapping holding one run's state."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        self._data: Dict[str, Any] = dict(data or {})
        self._data.update(kwargs)
        self._version = 0

    @classmethod
    def from_trigger(
        cls,
        trigger_payload: Any,
        node_outputs: Optional[Mapping[str, Any]] = None,
    ) -> "ExecutionContext":
        """Seed a context with ``trigger`` plus optional earlier outputs."""
        return cls(build_execution_context(trigger_payload, node_outputs))

    @property
    def version(self) -> int:
        """Number of writes since creation."""
        return self._version

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._version += 1

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._version += 1

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ExecutionContext(version={self._version}, keys={list(self._data)})"

    def snapshot(self) -> "ExecutionContext":
        """Independent deep copy carrying the same version."""
        clone = ExecutionContext(copy.deepcopy(self._data))
        clone._version = self._version
        return clone

    def merge(self, *others: Mapping[str, Any]) -> "ExecutionContext":
        """Deep-merge other contexts into this one, later ones winning."""
        for other in others:
            for key, value in other.items():
                self[key] = deep_merge(self._data[key], value) if key in self._data else copy.deepcopy(value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Deep copy of the contents as a plain dict."""
        return copy.deepcopy(self._data)


__all__ = ["ExecutionContext", "deep_merge"]
