"""Shared data cache that JSON config files merge into."""

from __future__ import annotations

import copy
import threading
from typing import Any


def merge_into(target: dict, source: dict) -> dict:
    """Recursively merge ``source`` into ``target`` in place.

    Nested mappings are merged key by key; any other value, lists
    included, replaces what was there.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            merge_into(existing, value)
        elif isinstance(value, dict):
            target[key] = merge_into({}, value)
        else:
            target[key] = value
    return target


class SharedData:
    """Data shared by every file in a pipeline run.

    Pass one instance to the middleware so parsed config files can
    contribute to it; tests create their own.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.Lock()

    def merge(self, mapping: dict[str, Any]) -> None:
        """Merge a copy of ``mapping``; later edits to it do not reach the cache."""
        incoming = copy.deepcopy(mapping)
        with self._lock:
            merge_into(self._data, incoming)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
