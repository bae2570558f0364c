from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float


class RateLimiter:
    """Fixed-window, in-process request limiter keyed by client identifier.

    Best effort: state lives in this object only and is lost on restart.
    Expired entries are swept when the store grows past `sweep_threshold`,
    there is no background timer.
    """

    def __init__(
        self,
        window_seconds: float = 15 * 60,
        max_requests: int = 5,
        sweep_threshold: int = 1000,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.window_seconds = float(window_seconds)
        self.max_requests = int(max_requests)
        self.sweep_threshold = int(sweep_threshold)
        self._clock = clock or time.time
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if e.reset_at < now]
        for k in expired:
            del self._entries[k]

    def check(self, identifier: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            if len(self._entries) > self.sweep_threshold:
                self._sweep(now)

            entry = self._entries.get(identifier)
            if entry is None or entry.reset_at < now:
                entry = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
                self._entries[identifier] = entry
                return RateLimitDecision(True, self.max_requests - 1, entry.reset_at)

            if entry.count >= self.max_requests:
                return RateLimitDecision(False, 0, entry.reset_at)

            entry.count += 1
            return RateLimitDecision(True, self.max_requests - entry.count, entry.reset_at)


def get_client_ip(headers: Mapping[str, str]) -> str:
    # Proxies in front of the app (Vercel, nginx, Cloudflare) set one of these
    forwarded_for = (headers.get("x-forwarded-for") or "").strip()
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    for name in ("x-real-ip", "cf-connecting-ip"):
        val = (headers.get(name) or "").strip()
        if val:
            return val
    return UNKNOWN_CLIENT
