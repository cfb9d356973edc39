"""Short-lived response cache used by the order gateway."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from urllib.parse import urlencode


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class ResponseCache:
    """Keyed cache whose entries are fresh for ``ttl`` seconds.

    Expired entries are kept until :meth:`clear` so callers can fall back to
    the last known value when the upstream is down. At most ``max_entries``
    keys are held; storing a new key beyond that drops the oldest one.
    """

    def __init__(
        self,
        name: str,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 256,
    ) -> None:
        self.name = name
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """Return the value for ``key`` if it is still fresh."""

        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.stored_at >= self.ttl:
            return None
        return entry.value

    def get_stale(self, key: str) -> Any | None:
        """Return the value for ``key`` regardless of age."""

        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def put(self, key: str, value: Any) -> None:
        # dict order doubles as age order
        self._entries.pop(key, None)
        while self._entries and len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = CacheEntry(value, self._clock())

    def clear(self) -> None:
        self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)


def cache_key(action: str, params: Mapping[str, Any] | None = None) -> str:
    """Return a stable key for ``action`` with ``params`` in sorted order."""

    items = sorted((k, str(v)) for k, v in (params or {}).items())
    return f"{action}?{urlencode(items)}" if items else action
