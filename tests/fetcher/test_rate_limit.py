from __future__ import annotations

import threading

import pytest

from config import Config
from fetcher.rate_limit import RateLimit, RateLimiter, RedisRateLimiter, build_rate_limiter


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_rate_limit_validates_values() -> None:
    with pytest.raises(ValueError):
        RateLimit(0)
    with pytest.raises(ValueError):
        RateLimit(1, period=0)


def test_requests_within_budget_do_not_wait() -> None:
    clock = _FakeClock()
    limiter = RateLimiter(RateLimit(3, 1.0), clock=clock, sleep=clock.sleep)

    waits = [limiter.acquire() for _ in range(3)]

    assert waits == [0.0, 0.0, 0.0]
    assert clock.sleeps == []


def test_request_over_budget_waits_for_window_to_roll() -> None:
    clock = _FakeClock()
    limiter = RateLimiter(RateLimit(2, 1.0), clock=clock, sleep=clock.sleep)

    limiter.acquire()
    clock.now = 0.25
    limiter.acquire()
    clock.now = 0.5
    waited = limiter.acquire()

    assert waited == pytest.approx(0.5)
    assert clock.now == pytest.approx(1.0)


def test_window_is_shared_across_threads() -> None:
    clock = _FakeClock()
    lock = threading.Lock()

    def sleep(seconds: float) -> None:
        with lock:
            clock.sleep(seconds)

    limiter = RateLimiter(RateLimit(5, 1.0), clock=clock, sleep=sleep)
    threads = [threading.Thread(target=limiter.acquire) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    # ten acquisitions at five per second cannot finish before t=1.0
    assert clock.now >= 1.0


def test_context_manager_acquires() -> None:
    clock = _FakeClock()
    limiter = RateLimiter(RateLimit(1, 1.0), clock=clock, sleep=clock.sleep)

    with limiter:
        pass
    with limiter:
        pass

    assert clock.sleeps == [pytest.approx(1.0)]


def test_build_rate_limiter_memory_backend() -> None:
    config = Config(environ={})

    assert build_rate_limiter("demo", None, config) is None
    assert type(build_rate_limiter("demo", RateLimit(10), config)) is RateLimiter


def test_redis_limiter_shares_window_between_instances() -> None:
    fakeredis = pytest.importorskip("fakeredis")
    server = fakeredis.FakeServer()
    clock = _FakeClock()
    clock.now = 1000.0
    first = RedisRateLimiter(RateLimit(2, 1.0), "demo", fakeredis.FakeStrictRedis(server=server), clock=clock, sleep=clock.sleep)
    second = RedisRateLimiter(RateLimit(2, 1.0), "demo", fakeredis.FakeStrictRedis(server=server), clock=clock, sleep=clock.sleep)

    first.acquire()
    second.acquire()
    waited = first.acquire()

    assert waited == pytest.approx(1.0)
    assert first.key == "rate_limit:demo"
