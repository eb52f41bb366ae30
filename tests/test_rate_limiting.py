"""
Tests for the fixed-window rate limiter.
"""
import pytest
from django.core.cache import cache
from django.test import RequestFactory

from contact.exceptions import RateLimitExceeded
from contact.rate_limiting import FixedWindowRateLimiter, get_client_ip


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    # 1_000_000 is a multiple of 100: the first window starts exactly here
    return FakeClock(1_000_000.0)


@pytest.fixture
def limiter(clock):
    return FixedWindowRateLimiter(cache, limit=3, window_seconds=100, clock=clock)


class TestFixedWindowRateLimiter:

    def test_allows_up_to_limit(self, limiter):
        results = [limiter.hit('1.2.3.4') for _ in range(3)]

        assert [r.allowed for r in results] == [True, True, True]
        assert [r.remaining for r in results] == [2, 1, 0]

    def test_rejects_after_limit(self, limiter):
        for _ in range(3):
            limiter.hit('1.2.3.4')

        result = limiter.hit('1.2.3.4')

        assert result.allowed is False
        assert result.count == 4

    def test_keys_are_independent(self, limiter):
        for _ in range(3):
            limiter.hit('1.2.3.4')

        assert limiter.hit('5.6.7.8').allowed is True

    def test_new_window_resets_count(self, limiter, clock):
        for _ in range(4):
            limiter.hit('1.2.3.4')

        clock.now += 100

        assert limiter.hit('1.2.3.4').allowed is True

    def test_retry_after_counts_down_to_window_end(self, limiter, clock):
        clock.now += 40

        assert limiter.hit('1.2.3.4').retry_after == 60

    def test_check_raises_when_exceeded(self, limiter, clock):
        for _ in range(3):
            limiter.check('1.2.3.4')

        clock.now += 25
        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.check('1.2.3.4')

        assert exc_info.value.retry_after == 75


class TestGetClientIp:

    def test_uses_remote_addr(self):
        request = RequestFactory().post('/api/contact', REMOTE_ADDR='203.0.113.7')

        assert get_client_ip(request) == '203.0.113.7'

    def test_ignores_forwarded_for_by_default(self):
        request = RequestFactory().post(
            '/api/contact', REMOTE_ADDR='10.0.0.1', HTTP_X_FORWARDED_FOR='203.0.113.7'
        )

        assert get_client_ip(request) == '10.0.0.1'

    def test_trusts_first_forwarded_hop_when_enabled(self):
        request = RequestFactory().post(
            '/api/contact', REMOTE_ADDR='10.0.0.1', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1'
        )

        assert get_client_ip(request, trust_forwarded_for=True) == '203.0.113.7'
