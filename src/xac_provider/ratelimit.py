"""Per-action rate limiting applied before API calls are dispatched."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import RateLimitExceeded


logger = logging.getLogger(__name__)


@dataclass
class RateLimiterConfig:
    """Token bucket settings.

    Attributes:
        requests_per_second: Refill rate of the bucket
        burst_size: Bucket capacity
        wait_timeout: Seconds acquire() waits for a token before giving up
    """
    requests_per_second: float = 20.0
    burst_size: int = 20
    wait_timeout: float = 30.0

    def __post_init__(self):
        if self.requests_per_second <= 0:
            raise ValueError(f"requests_per_second must be > 0, got {self.requests_per_second}")
        if self.burst_size < 1:
            raise ValueError(f"burst_size must be >= 1, got {self.burst_size}")


class TokenBucketRateLimiter:
    """Thread-safe token bucket."""

    def __init__(self, config: Optional[RateLimiterConfig] = None):
        self.config = config or RateLimiterConfig()
        self._tokens = float(self.config.burst_size)
        self._last_refill = time.monotonic()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_refill
        self._tokens = min(
            float(self.config.burst_size),
            self._tokens + elapsed * self.config.requests_per_second
        )
        self._last_refill = now

    def try_acquire(self) -> bool:
        """Take a token without waiting."""
        with self._lock:
            self._refill()
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """Take a token, waiting up to ``timeout`` seconds.

        Args:
            timeout: Seconds to wait (defaults to config.wait_timeout)

        Returns:
            True if a token was taken, False on timeout
        """
        timeout = self.config.wait_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout

        while True:
            with self._lock:
                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    return True
                wait = (1 - self._tokens) / self.config.requests_per_second

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(wait, remaining))

    @property
    def available_tokens(self) -> float:
        with self._lock:
            self._refill()
            return self._tokens


_limiters: Dict[str, TokenBucketRateLimiter] = {}
_overrides: Dict[str, RateLimiterConfig] = {}
_default_config: Optional[RateLimiterConfig] = None
_registry_lock = threading.Lock()


def set_default_config(config: RateLimiterConfig) -> None:
    """Set the config used for actions without an override."""
    global _default_config
    with _registry_lock:
        if config == _default_config:
            return
        _default_config = config
        for action in [a for a in _limiters if a not in _overrides]:
            del _limiters[action]


def set_rate_limit(action: str, config: RateLimiterConfig) -> None:
    """Override the limit of one action."""
    with _registry_lock:
        _overrides[action] = config
        _limiters.pop(action, None)


def get_rate_limiter(action: str) -> TokenBucketRateLimiter:
    """Get the limiter of an action, creating it on first use."""
    with _registry_lock:
        limiter = _limiters.get(action)
        if limiter is None:
            config = _overrides.get(action) or _default_config or RateLimiterConfig()
            limiter = TokenBucketRateLimiter(config)
            _limiters[action] = limiter
        return limiter


def reset_rate_limiters() -> None:
    """Drop every limiter, override and the default config."""
    global _default_config
    with _registry_lock:
        _limiters.clear()
        _overrides.clear()
        _default_config = None


def check(action: str) -> None:
    """Pre-flight check before dispatching ``action``.

    Blocks until the action's limiter grants a token.

    Raises:
        RateLimitExceeded: If no token is granted within the wait timeout
    """
    limiter = get_rate_limiter(action)
    if not limiter.acquire():
        logger.warning(f"Rate limit exceeded for action '{action}'")
        raise RateLimitExceeded(action, limiter.config.wait_timeout)
