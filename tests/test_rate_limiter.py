import asyncio

import pytest

from config.settings import CheckerConfig
from utils import rate_limiter
from utils.rate_limiter import (
    FixedDelayThrottle,
    NoThrottle,
    TokenBucketRateLimiter,
    build_throttle,
)


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []

    async def fake_sleep(delay):
        recorded.append(delay)

    monkeypatch.setattr(rate_limiter.asyncio, "sleep", fake_sleep)
    return recorded


def test_fixed_delay_sleeps_every_time(sleeps):
    throttle = FixedDelayThrottle(0.1)

    async def run():
        await throttle.acquire()
        await throttle.acquire()

    asyncio.run(run())
    assert sleeps == [0.1, 0.1]


def test_fixed_delay_rejects_negative():
    with pytest.raises(ValueError):
        FixedDelayThrottle(-1)


def test_token_bucket_allows_burst_then_waits(sleeps):
    limiter = TokenBucketRateLimiter(rate=10.0, burst=2)

    async def run():
        for _ in range(3):
            await limiter.acquire()

    asyncio.run(run())
    assert len(sleeps) == 1
    assert 0 < sleeps[0] <= 0.1


def test_build_throttle_from_config():
    assert isinstance(build_throttle(CheckerConfig(request_delay=0.1)), FixedDelayThrottle)
    assert isinstance(build_throttle(CheckerConfig(request_delay=0)), NoThrottle)
    bucket = build_throttle(CheckerConfig(rate_limit_per_second=5.0))
    assert isinstance(bucket, TokenBucketRateLimiter)
    assert bucket.rate == 5.0
