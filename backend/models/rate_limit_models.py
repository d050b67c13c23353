"""
/**
 * @file backend/models/rate_limit_models.py
 * @description 限流状态与判定结果（固定窗口计数）。
 */
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class RateLimitRecord:
    count: int
    window_reset_at_ms: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one fixed-window check for a client identifier."""

    allowed: bool
    limit: int
    remaining: int
    reset_at_ms: float

    def retry_after_seconds(self, now_ms: float) -> int:
        return max(1, math.ceil((self.reset_at_ms - now_ms) / 1000.0))

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(math.ceil(self.reset_at_ms / 1000.0))),
        }
