"""In-memory read-through cache for idempotent API responses."""

import hashlib
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    timestamp: float
    ttl: float
    endpoint: str = ""

    def is_fresh(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


def serialize_body(body: Any) -> bytes:
    """Stable byte form of a request body for key derivation."""
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8")


def base_path(endpoint: str) -> str:
    """First two path segments of endpoint, e.g. "/api/newsletter"."""
    path = endpoint.split("?", 1)[0]
    return "/".join(path.split("/")[:3])


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


class ResponseCache:
    """TTL cache keyed by a hash of method, endpoint and body.

    Expiry is lazy: entries are checked on read. Expired entries are swept
    on every write and dropped when a read finds them stale. There is no
    size bound beyond the TTL.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @staticmethod
    def make_key(method: str | None, endpoint: str, body: Any = None) -> str:
        """SHA-256 over method, endpoint (with query string) and serialized body."""
        digest = hashlib.sha256()
        digest.update((method or "GET").upper().encode("utf-8"))
        digest.update(b"\x00")
        digest.update(endpoint.encode("utf-8"))
        digest.update(b"\x00")
        digest.update(serialize_body(body))
        return digest.hexdigest()

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, data: Any, ttl: float | None = None, endpoint: str = "") -> None:
        now = self._clock()
        self.sweep(now)
        self._entries[key] = CacheEntry(
            data=data,
            timestamp=now,
            ttl=self.ttl if ttl is None else ttl,
            endpoint=endpoint,
        )

    def sweep(self, now: float | None = None) -> int:
        """Delete every expired entry and return how many were removed."""
        now = self._clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if not entry.is_fresh(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def invalidate(self, prefix: str) -> int:
        """Drop entries for path prefix and everything below it.

        Matching is on whole path segments, so "/api/s" does not touch
        "/api/services". Query strings are ignored on both sides.
        """
        path = prefix.split("?", 1)[0].rstrip("/")
        stale = [
            key for key, entry in self._entries.items()
            if _under(entry.endpoint.split("?", 1)[0], path)
        ]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
