from __future__ import annotations

from collections import OrderedDict
from typing import Optional

from .constants import CACHE_SIZE_DEFAULT


class GenerationCache:
    """Bounded least-recently-used map from diagram source to rendered bytes.

    Every `get` hit and every `put` marks the key as most recently used.
    Not synchronized: use it from a single event loop.
    """

    def __init__(self, capacity: int = CACHE_SIZE_DEFAULT):
        if capacity < 1:
            raise ValueError(f"cache capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._entries: OrderedDict[str, bytes] = OrderedDict()

    def get(self, key: str) -> Optional[bytes]:
        value = self._entries.get(key)
        if value is not None:
            self._entries.move_to_end(key)
        return value

    def put(self, key: str, value: bytes) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
