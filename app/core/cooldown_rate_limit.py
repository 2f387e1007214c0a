from __future__ import annotations

import threading
import time

from app.core.errors import RateLimitError


class CooldownRateLimiter:
    """Per-identifier cooldown: one accepted attempt per ``cooldown_s`` window.

    Rejected attempts do not refresh the stored timestamp. Entries older than
    ``entry_ttl_s`` are dropped by ``sweep``, which the application lifespan
    runs periodically, so cleanup is approximate.
    """

    def __init__(self, cooldown_s: float = 5.0, entry_ttl_s: float = 300.0):
        self._cooldown_s = cooldown_s
        self._entry_ttl_s = entry_ttl_s
        self._last_attempt: dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def cooldown_s(self) -> float:
        return self._cooldown_s

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_attempt)

    def should_reject(self, identifier: str, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        with self._lock:
            last = self._last_attempt.get(identifier)
        return last is not None and now - last < self._cooldown_s

    def record_attempt(self, identifier: str, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        with self._lock:
            self._last_attempt[identifier] = now

    def check(self, identifier: str, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        with self._lock:
            last = self._last_attempt.get(identifier)
            if last is not None and now - last < self._cooldown_s:
                retry_after = self._cooldown_s - (now - last)
                raise RateLimitError(
                    f"cooldown active for {identifier} ({retry_after:.1f}s left)",
                )
            self._last_attempt[identifier] = now

    def sweep(self, now: float | None = None) -> int:
        now = time.monotonic() if now is None else now
        cutoff = now - self._entry_ttl_s
        with self._lock:
            stale = [key for key, seen in self._last_attempt.items() if seen < cutoff]
            for key in stale:
                del self._last_attempt[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._last_attempt.clear()
