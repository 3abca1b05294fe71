"""In-process cache for survey results and response counts.

Key schema
----------
survey_results_{survey_id}     SurveyResultResponse   TTL 60s
survey_count_{survey_id}       int                    TTL 60s

Entries live for the lifetime of the process and are never persisted.
Values are opaque to the cache; callers own their meaning.
"""
from collections import namedtuple
from datetime import timedelta
from threading import Lock
from typing import Any, Optional, Union
import logging
import time

from cachetools import TLRUCache

from app.core.config import settings

logger = logging.getLogger(__name__)

_Entry = namedtuple("_Entry", ["value", "ttl"])


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCache:
    """Thread-safe key/value store with a per-entry expiry."""

    def __init__(self, maxsize: int = 10000, timer=time.monotonic):
        self._lock = Lock()
        self._store: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
        return None if entry is None else entry.value

    def set(self, key: str, value: Any, ttl: Union[timedelta, float]) -> None:
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        with self._lock:
            self._store[key] = _Entry(value, seconds)

    def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            self._store.expire()
            return len(self._store)


_cache: Optional[MemoryCache] = None


def get_cache() -> MemoryCache:
    """Return the process-wide cache, creating it on first use."""
    global _cache
    if _cache is None:
        _cache = MemoryCache(maxsize=settings.CACHE_MAX_ENTRIES)
        logger.info("Results cache created (maxsize=%s)", settings.CACHE_MAX_ENTRIES)
    return _cache
