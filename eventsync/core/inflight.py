"""
In-flight operation registry for the sync coordinator.

Tracks which operation keys are currently executing so that a second call
under the same key is rejected instead of queued.

Design decisions:
- OrderedDict storage keyed by operation key, value is the monotonic start time
- threading.Lock so check-then-set is one atomic step, even when change-feed
  callbacks arrive from worker threads
- Entries are removed only by release(); nothing is evicted on age. A gateway
  call that never returns keeps its key until the process restarts.
- Start times exist so stale keys can be reported by get_stats()
"""

import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Dict, Iterator, List, Optional

from eventsync.core.exceptions import ConflictError
from eventsync.core.utils import utcnow


def operation_key(prefix: str, target: Optional[str] = None) -> str:
    """Build an in-flight key: ``<prefix>:<target>`` or ``<prefix>:global``."""
    return f"{prefix}:{target or 'global'}"


class InFlightRegistry:
    """
    Set of operation keys currently executing.

    Storage format: OrderedDict[key: monotonic_start_time]
    """

    def __init__(self):
        self._entries: "OrderedDict[str, float]" = OrderedDict()
        self._lock = threading.Lock()
        self._acquired = 0
        self._rejected = 0

    def acquire(self, key: str) -> bool:
        """Mark key as in flight. Returns False if it already was."""
        with self._lock:
            if key in self._entries:
                self._rejected += 1
                return False
            self._entries[key] = time.monotonic()
            self._acquired += 1
            return True

    def release(self, key: str) -> None:
        """Remove key. Releasing an absent key is a no-op."""
        with self._lock:
            self._entries.pop(key, None)

    @contextmanager
    def claim(self, key: str, message: str) -> Iterator[None]:
        """Hold key for the duration of the block or raise ConflictError."""
        if not self.acquire(key):
            raise ConflictError(message, key=key)
        try:
            yield
        finally:
            self.release(key)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def stale_keys(self, older_than_seconds: float) -> List[str]:
        """Keys held longer than the given age."""
        now = time.monotonic()
        with self._lock:
            return [
                key for key, started in self._entries.items()
                if now - started > older_than_seconds
            ]

    def get_stats(self, stale_after_seconds: Optional[float] = None) -> Dict[str, Any]:
        """
        Get registry statistics for monitoring.

        Returns:
            Dictionary with:
            - size: Number of keys currently in flight
            - acquired: Total successful acquisitions
            - rejected: Total acquisitions refused because the key was held
            - entries: Per-key age and approximate wall-clock start
            - stale: Keys older than stale_after_seconds (when given)
        """
        now = time.monotonic()
        wall_now = utcnow()
        with self._lock:
            entries = {}
            stale = []
            for key, started in self._entries.items():
                age = now - started
                entries[key] = {
                    "age_seconds": round(age, 2),
                    "started_at": (wall_now - timedelta(seconds=age)).isoformat(),
                }
                if stale_after_seconds is not None and age > stale_after_seconds:
                    stale.append(key)

            return {
                "size": len(self._entries),
                "acquired": self._acquired,
                "rejected": self._rejected,
                "entries": entries,
                "stale": stale,
            }
