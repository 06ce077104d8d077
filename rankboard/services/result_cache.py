"""
Process-local cache-aside layer for serialized leaderboard pages.

Entries are immutable and expire after a fixed TTL. Expired entries are
dropped lazily on lookup and by a background sweep task started with init().
"""

import asyncio
import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Tuple

from rankboard.config import Config
from rankboard.constants import CacheConstants
from rankboard.data_models.leaderboard import RawQueryParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: bytes
    expires_at: float


class ResultCache:
    """TTL cache of page payloads keyed by a digest of the request parameters."""

    def __init__(
        self,
        ttl: float = None,
        cleanup_interval: float = None,
        max_size: int = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl = Config.CACHE_EXPIRATION if ttl is None else ttl
        self.cleanup_interval = Config.CACHE_CLEANUP_INTERVAL if cleanup_interval is None else cleanup_interval
        self.max_size = CacheConstants.DEFAULT_MAX_CACHE_SIZE if max_size is None else max_size
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()  # Guards _entries only, never held across compute()
        self._sweep_task: Optional[asyncio.Task] = None

    @staticmethod
    def derive_key(raw: RawQueryParams, page: int, limit: int) -> str:
        """
        Deterministic key over the full ordered parameter tuple.

        Page and limit are the resolved integers; every other member is the raw
        client value, so an ignored or defaulted value still changes the key.
        """
        parts = [
            page,
            limit,
            raw.search,
            raw.sort,
            raw.order,
            raw.class_filter,
            raw.min_score,
            raw.max_score,
        ]
        encoded = json.dumps(parts, ensure_ascii=False, separators=(',', ':'))
        return hashlib.sha256(encoded.encode('utf-8')).hexdigest()

    async def init(self):
        """Start the periodic sweep task."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info(
                f"Result cache started (ttl={self.ttl}s, sweep every {self.cleanup_interval}s)"
            )

    async def shutdown(self):
        """Stop the sweep task and drop all entries."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            await asyncio.gather(self._sweep_task, return_exceptions=True)
            self._sweep_task = None
        await self.clear()
        logger.info("Result cache stopped")

    async def get(self, key: str) -> Optional[bytes]:
        """Live value for key, or None. Expired entries are evicted here."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    async def set(self, key: str, value: bytes):
        """Insert or overwrite key with a fresh TTL."""
        entry = CacheEntry(value=value, expires_at=self._clock() + self.ttl)
        async with self._lock:
            self._entries[key] = entry
            if len(self._entries) > self.max_size:
                self._enforce_size_limit()

    async def fetch(self, key: str, compute: Callable[[], Awaitable[bytes]]) -> Tuple[bytes, bool]:
        """
        Return (payload, was_cache_hit).

        On a miss compute() runs outside the lock, so other keys stay readable
        while the store is queried. Concurrent misses on one key both compute
        and the last write wins. Failures and cancellation propagate and leave
        the cache untouched.
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for: {key}")
            return cached, True

        logger.debug(f"Cache miss for: {key}")
        result = await compute()
        await self.set(key, result)
        return result, False

    async def sweep(self) -> int:
        """Remove expired entries and return how many were dropped."""
        async with self._lock:
            now = self._clock()
            expired_keys = [key for key, entry in self._entries.items() if entry.expires_at <= now]
            for key in expired_keys:
                del self._entries[key]
        if expired_keys:
            logger.debug(f"Swept {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    async def clear(self):
        """Clears the entire result cache."""
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _enforce_size_limit(self):
        # Caller holds the lock; drop the entries closest to expiry first
        overflow = len(self._entries) - self.max_size
        oldest = sorted(self._entries.items(), key=lambda item: item[1].expires_at)[:overflow]
        for key, _ in oldest:
            del self._entries[key]

    async def _sweep_loop(self):
        while True:
            await asyncio.sleep(self.cleanup_interval)
            try:
                await self.sweep()
            except Exception as e:
                logger.error(f"Error in cache sweep task: {e}", exc_info=True)
