"""Tests for service wiring in app.api.v1.dependency."""

from unittest.mock import AsyncMock

from app.api.v1.dependency import get_transmission_manager
from app.app_config import get_app_environ_config


def test_transmission_manager_follows_current_redis_client():
    first_client = AsyncMock()
    second_client = AsyncMock()

    first = get_transmission_manager(first_client)
    second = get_transmission_manager(second_client)

    assert first._owner_lock.redis_client is first_client
    assert second._owner_lock.redis_client is second_client


def test_transmission_manager_shares_stores_and_lock_settings():
    app_config = get_app_environ_config()

    first = get_transmission_manager(AsyncMock())
    second = get_transmission_manager(AsyncMock())

    assert first._store is second._store
    assert first._manifest is second._manifest
    assert first._owner_lock.ttl == app_config.TRANSMISSION_LOCK_TTL_SECONDS
    assert first._owner_lock.wait_seconds == app_config.TRANSMISSION_LOCK_WAIT_SECONDS
