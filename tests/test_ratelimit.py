"""
tests/test_ratelimit.py - per-action rate limiting
"""

import time

import pytest

from xac_provider import ratelimit
from xac_provider.errors import ExchangeError, RateLimitExceeded
from xac_provider.ratelimit import RateLimiterConfig, TokenBucketRateLimiter


class TestRateLimiterConfig:
    """RateLimiterConfig"""

    def test_default_values(self):
        config = RateLimiterConfig()

        assert config.requests_per_second == 20.0
        assert config.burst_size == 20
        assert config.wait_timeout == 30.0

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            RateLimiterConfig(requests_per_second=0)

    def test_invalid_burst(self):
        with pytest.raises(ValueError):
            RateLimiterConfig(burst_size=0)


class TestTokenBucketRateLimiter:
    """TokenBucketRateLimiter"""

    def test_burst_then_empty(self):
        limiter = TokenBucketRateLimiter(RateLimiterConfig(requests_per_second=0.01, burst_size=3))

        assert limiter.try_acquire()
        assert limiter.try_acquire()
        assert limiter.try_acquire()
        assert not limiter.try_acquire()

    def test_acquire_times_out(self):
        limiter = TokenBucketRateLimiter(
            RateLimiterConfig(requests_per_second=0.01, burst_size=1, wait_timeout=0)
        )

        assert limiter.acquire()
        assert limiter.acquire() is False

    def test_acquire_waits_for_refill(self):
        limiter = TokenBucketRateLimiter(RateLimiterConfig(requests_per_second=50.0, burst_size=1))
        assert limiter.acquire()

        start = time.monotonic()
        assert limiter.acquire(timeout=1.0)
        assert time.monotonic() - start < 1.0

    def test_available_tokens_capped(self):
        limiter = TokenBucketRateLimiter(RateLimiterConfig(requests_per_second=1000.0, burst_size=5))
        time.sleep(0.01)

        assert limiter.available_tokens <= 5


class TestRegistry:
    """get_rate_limiter / set_rate_limit / check"""

    def test_same_limiter_per_action(self):
        assert ratelimit.get_rate_limiter("AssumeRole") is ratelimit.get_rate_limiter("AssumeRole")
        assert ratelimit.get_rate_limiter("AssumeRole") is not ratelimit.get_rate_limiter("DescribeRegions")

    def test_override(self):
        config = RateLimiterConfig(requests_per_second=1.0, burst_size=2)
        ratelimit.set_rate_limit("AssumeRole", config)

        assert ratelimit.get_rate_limiter("AssumeRole").config is config
        assert ratelimit.get_rate_limiter("DescribeRegions").config.burst_size == 20

    def test_default_config(self):
        ratelimit.get_rate_limiter("DescribeRegions")
        ratelimit.set_default_config(RateLimiterConfig(burst_size=7))

        assert ratelimit.get_rate_limiter("DescribeRegions").config.burst_size == 7

    def test_default_config_keeps_overrides(self):
        override = RateLimiterConfig(burst_size=2)
        ratelimit.set_rate_limit("AssumeRole", override)
        ratelimit.set_default_config(RateLimiterConfig(burst_size=7))

        assert ratelimit.get_rate_limiter("AssumeRole").config is override

    def test_same_default_config_keeps_limiters(self):
        """Re-applying an equal config does not refill the buckets"""
        ratelimit.set_default_config(RateLimiterConfig(burst_size=7))
        limiter = ratelimit.get_rate_limiter("AssumeRole")
        ratelimit.set_default_config(RateLimiterConfig(burst_size=7))

        assert ratelimit.get_rate_limiter("AssumeRole") is limiter

    def test_reset(self):
        limiter = ratelimit.get_rate_limiter("AssumeRole")
        ratelimit.reset_rate_limiters()

        assert ratelimit.get_rate_limiter("AssumeRole") is not limiter

    def test_check_passes(self):
        ratelimit.check("AssumeRole")

    def test_check_rejects(self):
        ratelimit.set_rate_limit(
            "AssumeRole", RateLimiterConfig(requests_per_second=0.01, burst_size=1, wait_timeout=0)
        )
        ratelimit.check("AssumeRole")

        with pytest.raises(RateLimitExceeded) as exc_info:
            ratelimit.check("AssumeRole")
        assert exc_info.value.action == "AssumeRole"
        assert isinstance(exc_info.value, ExchangeError)
