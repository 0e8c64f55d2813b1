"""
Pytest configuration and fixtures for boxtracker tests.
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone

from inventory.models import Box, BoxNumberPool

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Pool counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        email='test@example.com',
        password='testpass123'
    )


@pytest.fixture
def admin_user(db):
    """Create an admin user."""
    return User.objects.create_superuser(
        username='admin',
        email='admin@example.com',
        password='adminpass123'
    )


@pytest.fixture
def authenticated_client(client, user):
    """Return a Django test client with authenticated user."""
    client.force_login(user)
    return client


@pytest.fixture
def admin_client(client, admin_user):
    """Return a Django test client with authenticated admin."""
    client.force_login(admin_user)
    return client


@pytest.fixture
def make_pool(db):
    """
    Seed the pool directly.

    Usage: make_pool(range(1, 6), available={2, 5})
    """
    def _make(numbers, available=()):
        now = timezone.now()
        return BoxNumberPool.objects.bulk_create([
            BoxNumberPool(
                box_number=n,
                is_available=n in set(available),
                last_used_at=None if n in set(available) else now,
                created_at=now,
            )
            for n in numbers
        ])
    return _make


@pytest.fixture
def make_legacy_box(db):
    """
    Create a box row the way pre-pool data looks: inserted directly,
    optionally without a number, with an explicit creation time.
    """
    base = timezone.now() - timedelta(days=30)

    def _make(box_number=None, age_days=None, **fields):
        created_at = None if age_days is None else base - timedelta(days=age_days)
        return Box.objects.create(box_number=box_number, created_at=created_at, **fields)
    return _make
