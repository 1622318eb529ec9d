"""
Response Cache

In-memory TTL cache for normalized model responses.
Key = SHA-256 of the normalized request (trimmed text plus the
presence and short hash of any attached image/audio). TTL = 24 hours.

Prevents duplicate Gemini calls for identical submissions.
Access is serialized by an asyncio lock. Callers must not hold the
lock across the model call: check, await the model, then store.

Usage:
    from scamradar.cache import response_cache
    cached = await response_cache.get(content, image, audio)
    if cached is None:
        result = await call_model(...)
        await response_cache.set(content, result, image, audio)
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from scamradar.config import settings
from scamradar.logging import get_logger

logger = get_logger("cache")

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_SIZE = 1000

# Cleanup runs once the store is this full, or every N operations.
CLEANUP_FILL_RATIO = 0.8
CLEANUP_EVERY_N_OPS = 100

MEDIA_HASH_CHARS = 16


@dataclass
class CacheEntry:
    key: str
    data: Any
    timestamp: float
    ttl: float


def _media_hash(blob: object) -> Optional[str]:
    if not isinstance(blob, (bytes, bytearray, memoryview)) or len(blob) == 0:
        return None
    return hashlib.sha256(bytes(blob)).hexdigest()[:MEDIA_HASH_CHARS]


def make_key(content: object, image: object = None, audio: object = None) -> str:
    """Fingerprint a submission. Malformed parts hash as if absent."""
    image_hash = _media_hash(image)
    audio_hash = _media_hash(audio)
    normalized = {
        "content": content.strip() if isinstance(content, str) else "",
        "hasImage": image_hash is not None,
        "hasAudio": audio_hash is not None,
        "imageHash": image_hash,
        "audioHash": audio_hash,
    }
    raw = json.dumps(normalized, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(raw.encode()).hexdigest()


class ResponseCache:
    """Content-addressed TTL cache with a hard entry cap."""

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._cache: dict[str, CacheEntry] = {}
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0
        self._operations = 0

    @property
    def size(self) -> int:
        return len(self._cache)

    @property
    def max_size(self) -> int:
        return self._max_size

    async def get(
        self, content: object, image: object = None, audio: object = None,
    ) -> Optional[Any]:
        """Return the cached response if present and still fresh."""
        key = make_key(content, image, audio)
        async with self._lock:
            try:
                entry = self._cache.get(key)
                if entry is None:
                    self._misses += 1
                    return None

                if not isinstance(entry, CacheEntry):
                    logger.warning("Dropping malformed cache entry")
                    del self._cache[key]
                    self._misses += 1
                    return None

                if self._clock() - entry.timestamp >= entry.ttl:
                    del self._cache[key]
                    self._misses += 1
                    return None

                self._hits += 1
                return entry.data
            finally:
                self._maintain()

    async def set(
        self,
        content: object,
        response: Any,
        image: object = None,
        audio: object = None,
        ttl: Optional[float] = None,
    ) -> None:
        """Store a response under the submission's fingerprint."""
        key = make_key(content, image, audio)
        async with self._lock:
            self._cache[key] = CacheEntry(
                key=key,
                data=response,
                timestamp=self._clock(),
                ttl=self._default_ttl if ttl is None else ttl,
            )
            self._maintain()

    async def clear(self) -> None:
        """Drop every entry and reset all counters."""
        async with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0
            self._operations = 0

    async def reset_stats(self) -> None:
        """Reset hit/miss counters, keep entries."""
        async with self._lock:
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict:
        """Cache size and hit/miss statistics."""
        total = self._hits + self._misses
        return {
            "size": len(self._cache),
            "max_size": self._max_size,
            "hit_rate": round(self._hits / total * 100, 2) if total > 0 else 0.0,
            "total_requests": total,
            "hits": self._hits,
            "misses": self._misses,
        }

    # --- Maintenance (caller holds the lock) ---

    def _maintain(self) -> None:
        self._operations += 1
        if (
            len(self._cache) >= self._max_size * CLEANUP_FILL_RATIO
            or self._operations % CLEANUP_EVERY_N_OPS == 0
        ):
            self._cleanup()

    def _cleanup(self) -> None:
        now = self._clock()
        expired = [
            k for k, e in self._cache.items()
            if not isinstance(e, CacheEntry) or now - e.timestamp >= e.ttl
        ]
        for k in expired:
            del self._cache[k]

        evicted = 0
        overflow = len(self._cache) - self._max_size
        if overflow > 0:
            oldest = sorted(self._cache, key=lambda k: self._cache[k].timestamp)
            for k in oldest[:overflow]:
                del self._cache[k]
            evicted = overflow

        if expired or evicted:
            logger.debug(
                "Cache cleanup",
                extra={
                    "expired": len(expired),
                    "evicted": evicted,
                    "cache_size": len(self._cache),
                },
            )


# Shared across the application
response_cache = ResponseCache(
    max_size=settings.CACHE_MAX_SIZE,
    default_ttl=settings.CACHE_TTL_SECONDS,
)
