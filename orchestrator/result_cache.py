"""In-memory cache of generated documents.

Avoids paying twice for identical requests: the key covers provider, model,
template text and input variables, and entries expire a fixed time after
insertion. The cache is shared by every request in the process and has no
lock; two concurrent misses on the same key may both call the model and the
last write wins.
"""

import hashlib
import json
import time
from typing import Callable, Dict, Mapping, Optional, Tuple

from contracts import FileData

Clock = Callable[[], float]


def make_cache_key(provider: str, model: str, template: str, variables: Mapping[str, str]) -> str:
    """Deterministic SHA-256 over provider, model, template and variables."""
    payload = json.dumps(
        [provider, model, template, dict(variables)],
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ResultCache:
    """TTL cache of FileData keyed by ``make_cache_key`` output."""

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        clock: Optional[Clock] = None,
        key_fn: Callable[..., str] = make_cache_key,
    ):
        """Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry, measured from insertion.
            clock: Monotonic time source; injectable for tests.
            key_fn: Key strategy, called as key_fn(provider, model, template, variables).
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._key_fn = key_fn
        # key -> (expires_at, value)
        self._items: Dict[str, Tuple[float, FileData]] = {}

    def key_for(self, provider: str, model: str, template: str, variables: Mapping[str, str]) -> str:
        return self._key_fn(provider, model, template, variables)

    def get(self, key: str) -> Optional[FileData]:
        """Return the cached value, or None if absent or expired."""
        item = self._items.get(key)
        if item is None:
            return None
        expires_at, value = item
        if expires_at <= self._clock():
            self._items.pop(key, None)
            return None
        return value

    def put(self, key: str, value: FileData) -> None:
        """Store a value. Expired entries are dropped on every write."""
        self.sweep_expired()
        self._items[key] = (self._clock() + self.ttl_seconds, value)

    def sweep_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._items.items() if expires_at <= now]
        for k in expired:
            del self._items[k]
        return len(expired)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
