"""
Rate Limiting Utilities for Contact Form

Fixed-window counters per client address, kept in the Django cache so every
worker sees the same counts when the cache is Redis.
"""
import logging
import time
from dataclasses import dataclass
from functools import wraps

from rest_framework.response import Response
from rest_framework import status

from .exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)


RATE_LIMIT_MESSAGE = 'Too many contact form submissions. Please try again in {minutes} minutes.'


def get_client_ip(request, trust_forwarded_for=False):
    """Get client IP address from request."""
    if trust_forwarded_for:
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR') or 'unknown'


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    count: int
    limit: int
    retry_after: int

    @property
    def remaining(self):
        return max(self.limit - self.count, 0)


class FixedWindowRateLimiter:
    """
    Counts hits per key inside fixed time windows.

    Windows are aligned to multiples of ``window_seconds``. The counter is
    created with ``cache.add`` and advanced with ``cache.incr``; both are
    atomic on the locmem and Redis backends, so concurrent requests for the
    same key never share a count.

    Usage:
        limiter = FixedWindowRateLimiter(cache, limit=3, window_seconds=900)
        result = limiter.hit('203.0.113.7')
    """

    def __init__(self, cache, limit, window_seconds, key_prefix='contact-rl', clock=time.time):
        self.cache = cache
        self.limit = limit
        self.window_seconds = window_seconds
        self.key_prefix = key_prefix
        self.clock = clock

    def _window(self, now):
        start = int(now // self.window_seconds) * self.window_seconds
        return start, start + self.window_seconds

    def _key(self, client_key, window_start):
        return f"{self.key_prefix}:{client_key}:{window_start}"

    def hit(self, client_key) -> RateLimitResult:
        """Record one request for ``client_key`` and report whether it is allowed."""
        now = self.clock()
        window_start, window_end = self._window(now)
        key = self._key(client_key, window_start)

        # Expire a little after the window closes so late increments still land
        self.cache.add(key, 0, timeout=self.window_seconds + 1)
        try:
            count = self.cache.incr(key)
        except ValueError:
            # Key evicted between add() and incr()
            self.cache.add(key, 1, timeout=self.window_seconds + 1)
            count = 1

        retry_after = max(int(window_end - now), 1)
        return RateLimitResult(
            allowed=count <= self.limit,
            count=count,
            limit=self.limit,
            retry_after=retry_after,
        )

    def check(self, client_key) -> RateLimitResult:
        """Like :meth:`hit`, but raise RateLimitExceeded when over the limit."""
        result = self.hit(client_key)
        if not result.allowed:
            raise RateLimitExceeded(result.retry_after)
        return result


def rate_limit_contact_form(view_func):
    """
    Decorator for rate limiting contact form submissions.

    Runs before the view body, so rejected requests never reach validation.
    The limiter comes from the view's ``services`` container.
    """
    @wraps(view_func)
    def wrapped_view(self, request, *args, **kwargs):
        services = self.get_services()
        ip = get_client_ip(request, services.settings.trust_forwarded_for)

        try:
            result = services.rate_limiter.check(ip)
        except RateLimitExceeded as exc:
            logger.warning(f"Contact form rate limit exceeded for {ip}")
            minutes = max(services.rate_limiter.window_seconds // 60, 1)
            return Response(
                {
                    'success': False,
                    'message': RATE_LIMIT_MESSAGE.format(minutes=minutes),
                },
                status=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={
                    'Retry-After': str(exc.retry_after),
                    'RateLimit-Limit': str(services.rate_limiter.limit),
                    'RateLimit-Remaining': '0',
                    'RateLimit-Reset': str(exc.retry_after),
                }
            )

        response = view_func(self, request, *args, **kwargs)
        response['RateLimit-Limit'] = str(result.limit)
        response['RateLimit-Remaining'] = str(result.remaining)
        response['RateLimit-Reset'] = str(result.retry_after)
        return response

    return wrapped_view
