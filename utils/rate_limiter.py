"""
Throttles that pace requests to the RPC endpoint
Every throttle exposes a single awaitable acquire(); the orchestrator does not care which one it gets
"""
import asyncio
import time
from abc import ABC, abstractmethod

from utils.logger import get_logger

logger = get_logger(__name__)


class Throttle(ABC):
    """Waits, if needed, before the next unit of work may start"""

    @abstractmethod
    async def acquire(self):
        """Wait until the next request may be sent"""


class NoThrottle(Throttle):
    """Never waits"""

    async def acquire(self):
        return None


class FixedDelayThrottle(Throttle):
    """
    Sleeps a fixed delay on every acquire
    Simple courtesy pause between addresses
    """

    def __init__(self, delay: float):
        if delay < 0:
            raise ValueError("delay cannot be negative")
        self.delay = delay

    async def acquire(self):
        if self.delay > 0:
            await asyncio.sleep(self.delay)


class TokenBucketRateLimiter(Throttle):
    """
    Token bucket rate limiter for controlling API request rates
    """
    
    def __init__(self, rate: float, burst: int = 1):
        """
        Args:
            rate: Requests per second
            burst: Maximum burst size
        """
        if rate <= 0:
            raise ValueError("rate must be positive")
        self.rate = rate
        self.burst = burst
        self.tokens = float(burst)
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()
    
    async def acquire(self):
        """Wait until a token is available"""
        wait_time = 0
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_update
            if elapsed > 0:
                self.tokens = min(self.burst, self.tokens + elapsed * self.rate)
                self.last_update = now
            
            if self.tokens < 1:
                wait_time = (1 - self.tokens) / self.rate
                self.tokens = 0  # Reserve the token we're waiting for
            else:
                self.tokens -= 1
        
        if wait_time > 0:
            await asyncio.sleep(wait_time)


def build_throttle(config) -> Throttle:
    """Pick the throttle described by a CheckerConfig"""
    if config.rate_limit_per_second:
        logger.debug(f"Using token bucket at {config.rate_limit_per_second} addresses/sec")
        return TokenBucketRateLimiter(config.rate_limit_per_second, burst=1)
    if config.request_delay > 0:
        return FixedDelayThrottle(config.request_delay)
    return NoThrottle()
