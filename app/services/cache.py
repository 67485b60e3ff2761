# app/services/cache.py
from __future__ import annotations
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

# value = (expires_at_epoch, stored_at_epoch, data)
_Entry = Tuple[float, float, Any]


class TTLCache:
    """
    In-process time-expiring map.

    - Expired entries read as absent; nothing evicts them on a timer.
    - put() replaces the entry for a key, it never merges.
    - Constructed per application (or per test) and injected where needed.
    """

    def __init__(self, default_ttl_seconds: float = 10 * 60, clock: Callable[[], float] = time.time):
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, _Entry] = {}
        # sync FastAPI routes run in a thread pool
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, _, data = entry
        if self._clock() >= expires_at:
            return None
        return data

    def put(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        now = self._clock()
        ttl_seconds = self.default_ttl_seconds if ttl is None else ttl
        with self._lock:
            self._entries[key] = (now + ttl_seconds, now, value)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def status(self) -> Dict[str, dict]:
        """Per-key snapshot for the admin/debug routes."""
        now = self._clock()
        with self._lock:
            items = list(self._entries.items())
        out: Dict[str, dict] = {}
        for key, (expires_at, stored_at, data) in items:
            out[key_label(key)] = {
                "size": len(data) if hasattr(data, "__len__") else None,
                "stored_at": stored_at,
                "expires_at": expires_at,
                "expired": now >= expires_at,
            }
        return out

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ------------- common key helpers -------------

def key_tuple(*parts: Any) -> Tuple[Any, ...]:
    return tuple(parts)


def key_label(key: Hashable) -> str:
    if isinstance(key, tuple):
        return ":".join(str(p) for p in key)
    return str(key)
