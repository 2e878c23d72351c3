"""Fixtures for API route tests.

The app is exercised without its lifespan so no scheduler thread or
default database is started; the notification service is overridden with
one bound to the per-test SQLite database.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import limiter
from infrastructure.notifications.models import ChannelName
from infrastructure.notifications.service import NotificationService
from infrastructure.services import get_notification_service
from server.server import handler

CALLER_HEADERS = {"X-User-Id": "U1", "X-Tenant-Id": "T1"}


@pytest.fixture
def caller_headers():
    return dict(CALLER_HEADERS)


@pytest.fixture
def api_service(test_settings, record_store, mock_channel_factory):
    service = NotificationService(
        test_settings,
        record_store,
        channels={
            ChannelName.EMAIL: mock_channel_factory(ChannelName.EMAIL),
            ChannelName.PUSH: mock_channel_factory(ChannelName.PUSH),
        },
    )
    yield service
    service.shutdown()


@pytest.fixture
def override_service():
    def _override(service):
        handler.dependency_overrides[get_notification_service] = lambda: service

    yield _override
    handler.dependency_overrides.clear()


@pytest.fixture
def client(api_service, override_service):
    limiter.enabled = False
    override_service(api_service)
    yield TestClient(handler)
    limiter.enabled = True


@pytest.fixture
def mock_service_client(override_service):
    limiter.enabled = False
    service = MagicMock(spec=NotificationService)
    override_service(service)
    yield TestClient(handler), service
    limiter.enabled = True
