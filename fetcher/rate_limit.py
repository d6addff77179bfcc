"""
fetcher/rate_limit.py
Per-source request gates. One limiter is owned by each source and shared by
every walk against it, whichever thread the walk runs on.
"""

from __future__ import annotations

import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass

import redis
from redis.exceptions import WatchError
from rich.console import Console

console = Console()


@dataclass(frozen=True)
class RateLimit:
    """At most ``requests`` requests per rolling ``period`` seconds."""

    requests: int
    period: float = 1.0

    def __post_init__(self):
        if self.requests < 1:
            raise ValueError("RateLimit.requests must be >= 1")
        if self.period <= 0:
            raise ValueError("RateLimit.period must be > 0")


class RateLimiter:
    """Thread-safe sliding-window gate.

    ``acquire`` blocks until a slot is free inside the rolling window and
    returns the seconds spent waiting. ``release`` exists for contract
    symmetry with other backends; a sliding window frees slots by time.
    """

    def __init__(self, limit: RateLimit, name: str = "", clock=time.monotonic, sleep=time.sleep):
        self.limit = limit
        self.name = name
        self._clock = clock
        self._sleep = sleep
        self._stamps = deque()
        self._lock = threading.Lock()

    def acquire(self) -> float:
        waited = 0.0
        while True:
            with self._lock:
                now = self._clock()
                while self._stamps and now - self._stamps[0] >= self.limit.period:
                    self._stamps.popleft()
                if len(self._stamps) < self.limit.requests:
                    self._stamps.append(now)
                    return waited
                delay = self.limit.period - (now - self._stamps[0])
            self._sleep(delay)
            waited += delay

    def release(self) -> None:
        return None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class RedisRateLimiter(RateLimiter):
    """Sliding window kept in a redis sorted set, shared by every process
    that scrapes the same source."""

    def __init__(self, limit: RateLimit, name: str, client, clock=time.time, sleep=time.sleep):
        super().__init__(limit, name, clock=clock, sleep=sleep)
        self.client = client
        self.key = f"rate_limit:{name.lower()}"

    def acquire(self) -> float:
        waited = 0.0
        window_ms = int(self.limit.period * 1000)
        while True:
            now = self._clock()
            floor = now - self.limit.period
            with self.client.pipeline() as pipe:
                try:
                    pipe.watch(self.key)
                    count = pipe.zcount(self.key, f"({floor}", "+inf")
                    if count < self.limit.requests:
                        pipe.multi()
                        pipe.zremrangebyscore(self.key, 0, floor)
                        pipe.zadd(self.key, {uuid.uuid4().hex: now})
                        pipe.pexpire(self.key, window_ms)
                        pipe.execute()
                        return waited
                    oldest = pipe.zrangebyscore(self.key, f"({floor}", "+inf", start=0, num=1, withscores=True)
                except WatchError:
                    continue
            delay = self.limit.period - (now - oldest[0][1]) if oldest else self.limit.period
            delay = max(delay, 0.01)
            self._sleep(delay)
            waited += delay


def build_rate_limiter(name: str, limit: RateLimit | None, config) -> RateLimiter | None:
    """Pick the limiter backend named by ``config.rate_limit_backend``."""
    if limit is None:
        return None
    if config.rate_limit_backend == "redis":
        client = redis.Redis.from_url(config.redis_url, decode_responses=True)
        console.log(f"🚦 {name}: {limit.requests} req / {limit.period}s via redis")
        return RedisRateLimiter(limit, name, client)
    return RateLimiter(limit, name)
