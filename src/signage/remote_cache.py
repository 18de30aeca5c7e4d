"""
TTL cache for volatile remote data (weather, news, custom API values).

fetch() walks a fixed ladder: fresh cache entry, network request bounded by a
timeout, stale cache entry, caller fallback. Widgets always get something to
show, even when a poll cycle fails.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from src.common.logger import setup_logger
from .deadline import call_with_deadline
from .exceptions import RemoteFetchError
from .safe_storage import SafeStorage

logger = setup_logger(__name__)

CACHE_PREFIX = "hardy_cache_"
FETCH_TIMEOUT = 8          # seconds
DEFAULT_TTL = 300          # seconds


@dataclass
class CacheEntry:
    """A cached response body and when it was fetched (epoch millis)."""

    data: Any
    timestamp: int

    def is_fresh(self, now_ms: int, ttl_seconds: float) -> bool:
        return now_ms - self.timestamp < ttl_seconds * 1000

    def to_json(self) -> str:
        return json.dumps({"data": self.data, "timestamp": self.timestamp})

    @classmethod
    def from_json(cls, text: str) -> "CacheEntry":
        obj = json.loads(text)
        if not isinstance(obj, dict) or "timestamp" not in obj:
            raise ValueError("cache entry must be an object with a timestamp")
        return cls(data=obj.get("data"), timestamp=int(obj["timestamp"]))


class RemoteDataCache:
    """
    Stale-tolerant cached HTTP JSON retrieval.

    Usage:
        cache = RemoteDataCache(storage)
        forecast = cache.fetch("weather_widget_Boston", url, ttl_seconds=900)
    """

    def __init__(
        self,
        storage: SafeStorage,
        prefix: str = CACHE_PREFIX,
        timeout: float = FETCH_TIMEOUT,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            storage: Durable key-value store holding the entries
            prefix: Namespace prepended to every cache key
            timeout: Network timeout in seconds
            session: requests session (module-level requests if None)
            clock: Returns the current time in seconds
        """
        self._storage = storage
        self.prefix = prefix
        self.timeout = timeout
        self._session = session
        self._clock = clock

        # Stats
        self.hits = 0
        self.misses = 0
        self.stale_reads = 0

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def storage_key(self, key: str) -> str:
        return self.prefix + key

    def read_entry(self, key: str) -> Optional[CacheEntry]:
        """
        Read the cache entry for a key regardless of age.

        Returns:
            CacheEntry, or None if absent or unreadable
        """
        stored = self._storage.get(self.storage_key(key))
        if not stored:
            return None
        try:
            return CacheEntry.from_json(stored)
        except (TypeError, ValueError, OverflowError, RecursionError) as e:
            logger.warning("Cache read error for %s: %s", key, e)
            return None

    def fetch(
        self,
        key: str,
        url: str,
        ttl_seconds: float = DEFAULT_TTL,
        fallback: Any = None,
    ) -> Any:
        """
        Get remote JSON through the cache.

        Args:
            key: Cache key, independent of other keys
            url: Resource to GET
            ttl_seconds: Age under which a cached entry is served without a request
            fallback: Returned when the request fails and nothing is cached

        Returns:
            Fresh cached data, new data, stale cached data, or fallback
        """
        entry = self.read_entry(key)
        if entry is not None and entry.is_fresh(self._now_ms(), ttl_seconds):
            self.hits += 1
            return entry.data

        self.misses += 1
        try:
            data = self._request(url)
        except RemoteFetchError as e:
            logger.warning("Fetch failed for %s (%s): %s", key, e.kind, e)
            # Re-read: another poller may have refreshed the key meanwhile
            stale = self.read_entry(key)
            if stale is not None:
                self.stale_reads += 1
                logger.warning("Returning stale data for %s", key)
                return stale.data
            return fallback

        self._store(key, data)
        return data

    def _request(self, url: str) -> Any:
        """GET and decode JSON within the timeout, measured end to end."""
        return call_with_deadline(self._get_json, self.timeout, url, description=f"GET {url}")

    def _get_json(self, url: str) -> Any:
        """GET and decode JSON, mapping every failure to RemoteFetchError."""
        http = self._session if self._session is not None else requests
        try:
            response = http.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise RemoteFetchError(
                RemoteFetchError.TIMEOUT, f"No response within {self.timeout}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise RemoteFetchError(RemoteFetchError.NETWORK, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise RemoteFetchError(
                RemoteFetchError.BAD_STATUS,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            raise RemoteFetchError(RemoteFetchError.PARSE, f"Invalid JSON body: {e}") from e

    def _store(self, key: str, data: Any) -> None:
        """Write a new entry. Best-effort: failures are logged only."""
        try:
            entry = CacheEntry(data=data, timestamp=self._now_ms())
            blob = entry.to_json()
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning("Cache write error for %s: %s", key, e)
            return

        storage_key = self.storage_key(key)
        with self._storage.lock_for(storage_key):
            self._storage.set(storage_key, blob)

    def invalidate(self, key: str) -> None:
        """Drop the cached entry for a key."""
        self._storage.remove(self.storage_key(key))

    def get_stats(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "stale_reads": self.stale_reads,
        }

    def __repr__(self) -> str:
        return f"RemoteDataCache(prefix={self.prefix!r}, timeout={self.timeout})"
