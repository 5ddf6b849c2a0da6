from __future__ import annotations

import time
from typing import Any, Dict, Optional, Tuple

_DEFAULT_TTL = 60


class TTLCache:
    """Tiny in-process cache for static Judge0 metadata (languages, statuses)."""

    def __init__(self, default_ttl: int = _DEFAULT_TTL) -> None:
        self.default_ttl = max(1, int(default_ttl))
        self._store: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        item = self._store.get(key)
        if not item:
            return None
        value, exp = item
        if time.monotonic() < exp:
            return value
        self._store.pop(key, None)
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl_s = int(ttl if ttl is not None else self.default_ttl)
        self._store[key] = (value, time.monotonic() + max(1, ttl_s))

    def clear(self, prefix: Optional[str] = None) -> None:
        if prefix is None:
            self._store.clear()
            return
        for k in [k for k in self._store if k.startswith(prefix)]:
            self._store.pop(k, None)


__all__ = ["TTLCache"]
