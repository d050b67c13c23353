"""
/**
 * @file backend/services/rate_limiter_service.py
 * @description 固定窗口限流：可注入的计数存储 + 限流器。
 * @note 默认存储为进程内字典（加锁、容量有界、过期清理）；多实例部署可替换为共享缓存实现。
 */
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Optional, Protocol

from backend.models.rate_limit_models import RateLimitDecision, RateLimitRecord


logger = logging.getLogger("rate_limiter")

DEFAULT_LIMIT = 10
DEFAULT_WINDOW_MS = 60000


def _now_ms() -> float:
    return time.time() * 1000.0


class RateLimitStore(Protocol):
    def hit(self, identifier: str, limit: int, window_ms: int, now_ms: float) -> RateLimitDecision:
        ...

    def sweep(self, now_ms: float) -> int:
        ...

    def reset(self) -> None:
        ...

    def __len__(self) -> int:
        ...


class InMemoryRateLimitStore:
    """Process-local fixed-window counters keyed by client identifier."""

    def __init__(self, max_entries: int = 10000):
        self.max_entries = max_entries
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get(self, identifier: str) -> Optional[RateLimitRecord]:
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                return None
            return RateLimitRecord(count=record.count, window_reset_at_ms=record.window_reset_at_ms)

    def hit(self, identifier: str, limit: int, window_ms: int, now_ms: float) -> RateLimitDecision:
        with self._lock:
            record = self._records.get(identifier)
            # Reaching the reset instant starts a new window.
            if record is None or now_ms >= record.window_reset_at_ms:
                if record is None:
                    self._make_room(now_ms)
                record = RateLimitRecord(count=1, window_reset_at_ms=now_ms + window_ms)
                self._records[identifier] = record
                return RateLimitDecision(True, limit, max(0, limit - 1), record.window_reset_at_ms)

            if record.count >= limit:
                return RateLimitDecision(False, limit, 0, record.window_reset_at_ms)

            record.count += 1
            return RateLimitDecision(True, limit, max(0, limit - record.count), record.window_reset_at_ms)

    def sweep(self, now_ms: float) -> int:
        with self._lock:
            return self._sweep_locked(now_ms)

    def reset(self) -> None:
        with self._lock:
            self._records.clear()

    def _sweep_locked(self, now_ms: float) -> int:
        expired = [k for k, r in self._records.items() if now_ms >= r.window_reset_at_ms]
        for k in expired:
            del self._records[k]
        return len(expired)

    def _make_room(self, now_ms: float) -> None:
        if len(self._records) < self.max_entries:
            return
        self._sweep_locked(now_ms)
        while len(self._records) >= self.max_entries:
            oldest = min(self._records, key=lambda k: self._records[k].window_reset_at_ms)
            del self._records[oldest]


class FixedWindowRateLimiter:
    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        clock: Callable[[], float] = _now_ms,
        sweep_interval_ms: int = 60000,
    ):
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.clock = clock
        self.sweep_interval_ms = sweep_interval_ms
        self._last_sweep_ms = clock()
        self._sweep_lock = threading.Lock()

    def check(self, identifier: str, limit: int = DEFAULT_LIMIT, window_ms: int = DEFAULT_WINDOW_MS) -> RateLimitDecision:
        now = self.clock()
        self._maybe_sweep(now)
        decision = self.store.hit(identifier, limit, window_ms, now)
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for client {identifier}")
        return decision

    def allow(self, identifier: str, limit: int = DEFAULT_LIMIT, window_ms: int = DEFAULT_WINDOW_MS) -> bool:
        return self.check(identifier, limit, window_ms).allowed

    def _maybe_sweep(self, now: float) -> None:
        with self._sweep_lock:
            if now - self._last_sweep_ms < self.sweep_interval_ms:
                return
            self._last_sweep_ms = now
        removed = self.store.sweep(now)
        if removed:
            logger.debug(f"Swept {removed} expired rate limit entries")
