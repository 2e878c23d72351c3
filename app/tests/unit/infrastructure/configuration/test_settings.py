"""Unit tests for infrastructure.configuration.

Tests cover:
- Defaults of each settings section
- Environment overrides
- Validation of the default priority
- Settings aggregation
"""

import pytest
from pydantic import ValidationError

from infrastructure.configuration import (
    ChannelProviderSettings,
    DatabaseSettings,
    DispatchSettings,
    ServerSettings,
    Settings,
)


@pytest.mark.unit
class TestDispatchSettings:
    def test_defaults(self):
        dispatch = DispatchSettings()

        assert dispatch.DISPATCH_CHANNEL_TIMEOUT_SECONDS == 10.0
        assert dispatch.DISPATCH_MAX_BULK_WORKERS == 8
        assert dispatch.DISPATCH_DEFAULT_PRIORITY == "medium"
        assert dispatch.DISPATCH_CLEANUP_INTERVAL_MINUTES == 60

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DISPATCH_CHANNEL_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("DISPATCH_DEFAULT_PRIORITY", "high")

        dispatch = DispatchSettings()

        assert dispatch.DISPATCH_CHANNEL_TIMEOUT_SECONDS == 2.5
        assert dispatch.DISPATCH_DEFAULT_PRIORITY == "high"

    def test_unknown_default_priority_is_rejected(self, monkeypatch):
        monkeypatch.setenv("DISPATCH_DEFAULT_PRIORITY", "critical")

        with pytest.raises(ValidationError):
            DispatchSettings()


@pytest.mark.unit
class TestChannelProviderSettings:
    def test_provider_for_reads_channel_prefix(self, monkeypatch):
        monkeypatch.setenv("WHATSAPP_PROVIDER_URL", "https://wa.example.com/send")
        monkeypatch.setenv("WHATSAPP_PROVIDER_API_KEY", "wa-key")

        channels = ChannelProviderSettings()

        assert channels.provider_for("whatsapp") == (
            "https://wa.example.com/send",
            "wa-key",
        )

    def test_unknown_channel_has_no_provider(self):
        assert ChannelProviderSettings().provider_for("fax") == (None, None)

    def test_circuit_defaults(self):
        channels = ChannelProviderSettings()

        assert channels.CHANNEL_CIRCUIT_FAILURE_THRESHOLD == 5
        assert channels.CHANNEL_CIRCUIT_TIMEOUT_SECONDS == 60
        assert channels.CHANNEL_REQUEST_TIMEOUT_SECONDS == 30.0


@pytest.mark.unit
class TestInfrastructureSettings:
    def test_database_url_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://db/notifications")

        assert DatabaseSettings().DATABASE_URL == "postgresql://db/notifications"

    def test_allowed_origins_are_split_and_trimmed(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")

        assert ServerSettings().allowed_origins == [
            "https://a.example.com",
            "https://b.example.com",
        ]


@pytest.mark.unit
class TestSettings:
    def test_sections_are_instantiated(self):
        settings = Settings()

        assert isinstance(settings.channels, ChannelProviderSettings)
        assert isinstance(settings.dispatch, DispatchSettings)
        assert isinstance(settings.database, DatabaseSettings)
        assert isinstance(settings.server, ServerSettings)

    def test_explicit_section_is_kept(self):
        dispatch = DispatchSettings(DISPATCH_MAX_BULK_WORKERS=2)

        assert Settings(dispatch=dispatch).dispatch.DISPATCH_MAX_BULK_WORKERS == 2

    def test_is_production_follows_prefix(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "dev-")

        assert Settings().is_production is False
        assert Settings(PREFIX="").is_production is True
