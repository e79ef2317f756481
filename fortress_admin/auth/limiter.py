"""
Fortress Admin — Login Attempt Limiter.

Fixed-window brute-force protection for the login endpoint. The first
attempt from an IP opens a window; once the attempt budget for that
window is spent the IP is refused until the window closes.

Counters live in Redis when it is connected (shared across workers) and
in process memory otherwise.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fortress_admin.storage.redis_client import RedisManager

logger = logging.getLogger("fortress.auth.limiter")


@dataclass
class _Window:
    count: int
    first_attempt: float


@dataclass(frozen=True)
class LimitResult:
    allowed: bool
    retry_after: int = 0


class LoginAttemptLimiter:
    """Per-IP login attempt counter."""

    KEY_PREFIX = "fortress:login:"

    def __init__(
        self,
        max_attempts: int = 5,
        window_secs: int = 15 * 60,
        redis: Optional[RedisManager] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_attempts = max_attempts
        self.window_secs = window_secs
        self._redis = redis
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    async def hit(self, client_ip: str) -> LimitResult:
        """Record one attempt. Refused attempts are not counted."""
        client = self._redis.client if self._redis else None
        if client is not None:
            try:
                return await self._hit_redis(client, client_ip)
            except Exception as exc:
                logger.warning("Redis login counter failed (%s); using local counters", exc)
        return self._hit_local(client_ip)

    async def reset(self, client_ip: str) -> None:
        self._windows.pop(client_ip, None)
        client = self._redis.client if self._redis else None
        if client is not None:
            try:
                await client.delete(self.KEY_PREFIX + client_ip)
            except Exception as exc:
                logger.warning("Redis login counter reset failed: %s", exc)

    # ── Internal ─────────────────────────────────────────

    def _hit_local(self, client_ip: str) -> LimitResult:
        now = self._clock()
        self._prune(now)

        window = self._windows.get(client_ip)
        if window is None or now - window.first_attempt > self.window_secs:
            self._windows[client_ip] = _Window(count=1, first_attempt=now)
            return LimitResult(allowed=True)

        if window.count >= self.max_attempts:
            remaining = self.window_secs - (now - window.first_attempt)
            return LimitResult(allowed=False, retry_after=max(1, math.ceil(remaining)))

        window.count += 1
        return LimitResult(allowed=True)

    def _prune(self, now: float) -> None:
        stale = [
            ip for ip, w in self._windows.items()
            if now - w.first_attempt > self.window_secs
        ]
        for ip in stale:
            del self._windows[ip]

    async def _hit_redis(self, client, client_ip: str) -> LimitResult:
        key = self.KEY_PREFIX + client_ip
        # SET NX EX and INCR run as one transaction: the counter always has a TTL
        pipe = client.pipeline(transaction=True)
        pipe.set(key, 0, ex=self.window_secs, nx=True)
        pipe.incr(key)
        _, count = await pipe.execute()
        if count <= self.max_attempts:
            return LimitResult(allowed=True)

        # Undo the refused attempt so the window budget stays fixed.
        await client.decr(key)
        ttl = await client.ttl(key)
        if ttl is None or ttl < 0:
            # Counter left without a TTL by an older writer
            await client.expire(key, self.window_secs)
            ttl = self.window_secs
        return LimitResult(allowed=False, retry_after=max(1, ttl))
