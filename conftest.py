import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Rate limit counters live in the shared locmem cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def valid_submission():
    return {
        'name': 'Jane Doe',
        'phone': '+1 555-123-4567',
        'email': 'jane@example.com',
        'reason': 'Sales',
        'description': 'I would like a quote for your services.',
        'consent': True,
    }
