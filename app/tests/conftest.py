"""Shared fixtures for the notification service test suite."""

from typing import Callable, Optional
from unittest.mock import MagicMock

import pytest

from infrastructure.configuration import (
    ChannelProviderSettings,
    DatabaseSettings,
    DispatchSettings,
    ServerSettings,
    Settings,
)
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import (
    ChannelName,
    ChannelResult,
    NotificationType,
)
from infrastructure.notifications.store import NotificationRecordStore
from infrastructure.persistence import (
    build_engine,
    build_session_factory,
    create_schema,
)
from tests.factories.notifications import (
    make_channel_set,
    make_notification_request,
)


@pytest.fixture
def database_url(tmp_path) -> str:
    """File-backed SQLite database so worker threads share one database."""
    return f"sqlite:///{tmp_path / 'notifications.db'}"


@pytest.fixture
def test_settings(database_url) -> Settings:
    """Settings with no external providers and a short channel deadline."""
    return Settings(
        channels=ChannelProviderSettings(),
        dispatch=DispatchSettings(
            DISPATCH_CHANNEL_TIMEOUT_SECONDS=2.0,
            DISPATCH_MAX_BULK_WORKERS=4,
        ),
        database=DatabaseSettings(DATABASE_URL=database_url),
        server=ServerSettings(),
    )


@pytest.fixture
def db_engine(database_url):
    engine = build_engine(database_url)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def record_store(session_factory) -> NotificationRecordStore:
    return NotificationRecordStore(session_factory)


@pytest.fixture
def order_created_type(record_store) -> NotificationType:
    """Active ``order_created`` type with no templates."""
    return record_store.add_notification_type("order_created", "Order created")


@pytest.fixture
def low_stock_type(record_store) -> NotificationType:
    return record_store.add_notification_type("low_stock", "Low stock")


@pytest.fixture
def notification_request_factory():
    """Factory for NotificationRequest instances.

    Example:
        request = notification_request_factory(type="low_stock")
    """
    return make_notification_request


@pytest.fixture
def channel_set_factory():
    """Factory for ChannelSet instances.

    Example:
        channels = channel_set_factory(in_app=True, sms=True)
    """
    return make_channel_set


@pytest.fixture
def mock_channel_factory() -> Callable[..., MagicMock]:
    """Factory for mocked NotificationChannel adapters.

    By default the mock reports every send as sent.

    Example:
        email = mock_channel_factory(ChannelName.EMAIL, side_effect=RuntimeError("down"))
    """

    def _factory(
        channel: ChannelName,
        result: Optional[ChannelResult] = None,
        side_effect=None,
    ) -> MagicMock:
        mock = MagicMock(spec=NotificationChannel)
        mock.channel_name = channel
        if side_effect is not None:
            mock.send.side_effect = side_effect
        else:
            mock.send.return_value = result or ChannelResult.sent(
                channel, f"Delivered on {channel.value}"
            )
        return mock

    return _factory
