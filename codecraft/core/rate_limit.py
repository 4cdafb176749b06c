"""Fixed-window request counter keyed by caller identity.

The default store lives in process memory, so every worker process (or
container replica) counts on its own: with N instances a user can make up to
N * max_requests calls per window. It bounds abuse per instance, not globally.
A store backed by a shared cache can be passed to RateLimiter to make the
limit global.

Windows start at the first request for a key and are not rolling, so up to
2 * max_requests calls can land in a short span straddling a window boundary.
"""
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from codecraft.core.config import get_settings


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float  # epoch milliseconds


class RateLimitStore(Protocol):
    def get(self, key: str) -> RateLimitEntry | None: ...

    def set(self, key: str, entry: RateLimitEntry) -> None: ...

    def sweep(self, now: float) -> None: ...


class MemoryRateLimitStore:
    """Dict-backed store. Expired entries are swept once more than
    sweep_threshold keys are held; this is a soft bound, not a cap."""

    def __init__(self, sweep_threshold: int = 100):
        self.sweep_threshold = sweep_threshold
        self._entries: dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> RateLimitEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: RateLimitEntry) -> None:
        self._entries[key] = entry

    def sweep(self, now: float) -> None:
        if len(self._entries) <= self.sweep_threshold:
            return
        expired = [k for k, e in self._entries.items() if now > e.reset_at]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()


def _now_ms() -> float:
    return time.time() * 1000


class RateLimiter:
    def __init__(self, store: RateLimitStore | None = None, clock: Callable[[], float] = _now_ms):
        self.store = store if store is not None else MemoryRateLimitStore()
        self.clock = clock

    def is_rate_limited(self, key: str, max_requests: int, window_ms: int) -> bool:
        """Count one request for key; True means it should be blocked."""
        now = self.clock()
        self.store.sweep(now)

        entry = self.store.get(key)
        if entry is None or now > entry.reset_at:
            self.store.set(key, RateLimitEntry(count=1, reset_at=now + window_ms))
            return False

        entry.count += 1
        self.store.set(key, entry)
        return entry.count > max_requests

    def reset(self) -> None:
        clear = getattr(self.store, "clear", None)
        if clear is not None:
            clear()


limiter = RateLimiter(MemoryRateLimitStore(sweep_threshold=get_settings().rate_limit_sweep_threshold))


def get_rate_limiter() -> RateLimiter:
    return limiter
