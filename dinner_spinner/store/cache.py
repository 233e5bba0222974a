from __future__ import annotations

import threading
import time
import uuid
from typing import Any

_DEFAULT_TTL = 300  # 5 minutes


class ItemListCache:
    """
    Serialised item lists keyed by kind ("meals", "restaurants") and filter.

    Each kind carries a revision that every successful mutation bumps. The
    revision feeds the list ``ETag`` so any client-held copy goes stale the
    moment the admin changes that kind. Entries remember the revision they
    were loaded under and are never served once that revision has passed.
    """

    def __init__(self, ttl: float = _DEFAULT_TTL) -> None:
        self.ttl = ttl
        self._entries: dict[tuple[str, str], dict[str, Any]] = {}
        self._revisions: dict[str, int] = {}
        # sync routes run on a threadpool
        self._lock = threading.Lock()
        # distinguishes revisions of this process from a previous run
        self._epoch = uuid.uuid4().hex[:8]
        self._hits = 0
        self._misses = 0

    def get(self, kind: str, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get((kind, key))
            if (
                entry
                and entry["revision"] == self._revisions.get(kind, 0)
                and time.time() - entry["created_at"] < self.ttl
            ):
                self._hits += 1
                return entry["value"]
            if entry:
                del self._entries[(kind, key)]
            self._misses += 1
            return None

    def set(self, kind: str, key: str, value: Any, revision: int) -> bool:
        """
        Store ``value`` loaded while ``revision`` was current.

        A value loaded before a mutation landed is dropped; returns whether
        it was kept.
        """
        with self._lock:
            if revision != self._revisions.get(kind, 0):
                return False
            self._entries[(kind, key)] = {
                "value": value,
                "revision": revision,
                "created_at": time.time(),
            }
            return True

    def invalidate(self, kind: str) -> None:
        with self._lock:
            for entry_key in [k for k in self._entries if k[0] == kind]:
                del self._entries[entry_key]
            self._revisions[kind] = self._revisions.get(kind, 0) + 1

    def revision(self, kind: str) -> int:
        with self._lock:
            return self._revisions.get(kind, 0)

    def etag(self, kind: str, revision: int | None = None) -> str:
        if revision is None:
            revision = self.revision(kind)
        return f'W/"{kind}-{self._epoch}-{revision}"'

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
                "revisions": dict(self._revisions),
            }
