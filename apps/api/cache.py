import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple

import packages.config as config
from packages.metrics import inc


# key -> (expires_at or None, value, version)
_cache: "OrderedDict[str, Tuple[Optional[float], Any, Optional[str]]]" = OrderedDict()
_lock = threading.Lock()


def get_or_set(key: str, ttl_seconds: Optional[int], version: Optional[str], compute: Callable[[], Any]) -> Any:
    """Return the cached value for ``key`` or compute and store it.

    ``ttl_seconds=None`` keeps the entry until it is evicted; an entry whose
    ``version`` differs from the caller's is treated as stale.
    """
    now = time.time()
    with _lock:
        entry = _cache.get(key)
        if entry:
            expires_at, value, cached_version = entry
            if (expires_at is None or expires_at > now) and cached_version == version:
                _cache.move_to_end(key)
                inc("cache_hits_total")
                return value
            del _cache[key]
    inc("cache_misses_total")

    value = compute()
    expires_at = None if ttl_seconds is None else now + ttl_seconds
    with _lock:
        _cache[key] = (expires_at, value, version)
        _cache.move_to_end(key)
        while len(_cache) > max(1, config.CACHE_MAX_ENTRIES):
            _cache.popitem(last=False)
            inc("cache_evictions_total")
    return value


def size() -> int:
    with _lock:
        return len(_cache)


def clear() -> None:
    with _lock:
        _cache.clear()
