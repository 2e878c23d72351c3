"""External delivery channel provider settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class ChannelProviderSettings(IntegrationSettings):
    """Delivery provider configuration for the external channels.

    Each external channel (email, SMS, push, WhatsApp) posts to a provider
    endpoint. A channel without a provider URL is still registered but
    reports every send as failed with NOT_CONFIGURED.

    Environment Variables:
        EMAIL_PROVIDER_URL / EMAIL_PROVIDER_API_KEY: Email provider endpoint and key
        SMS_PROVIDER_URL / SMS_PROVIDER_API_KEY: SMS provider endpoint and key
        PUSH_PROVIDER_URL / PUSH_PROVIDER_API_KEY: Push provider endpoint and key
        WHATSAPP_PROVIDER_URL / WHATSAPP_PROVIDER_API_KEY: WhatsApp provider endpoint and key
        CHANNEL_REQUEST_TIMEOUT_SECONDS: HTTP timeout per provider call (default: 30)
        CHANNEL_CIRCUIT_FAILURE_THRESHOLD: Consecutive failures before a
            channel circuit opens (default: 5)
        CHANNEL_CIRCUIT_TIMEOUT_SECONDS: Seconds an open circuit waits before
            a recovery attempt (default: 60)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        url, api_key = settings.channels.provider_for("email")
        ```
    """

    EMAIL_PROVIDER_URL: Optional[str] = Field(default=None, alias="EMAIL_PROVIDER_URL")
    EMAIL_PROVIDER_API_KEY: Optional[str] = Field(
        default=None, alias="EMAIL_PROVIDER_API_KEY"
    )
    SMS_PROVIDER_URL: Optional[str] = Field(default=None, alias="SMS_PROVIDER_URL")
    SMS_PROVIDER_API_KEY: Optional[str] = Field(
        default=None, alias="SMS_PROVIDER_API_KEY"
    )
    PUSH_PROVIDER_URL: Optional[str] = Field(default=None, alias="PUSH_PROVIDER_URL")
    PUSH_PROVIDER_API_KEY: Optional[str] = Field(
        default=None, alias="PUSH_PROVIDER_API_KEY"
    )
    WHATSAPP_PROVIDER_URL: Optional[str] = Field(
        default=None, alias="WHATSAPP_PROVIDER_URL"
    )
    WHATSAPP_PROVIDER_API_KEY: Optional[str] = Field(
        default=None, alias="WHATSAPP_PROVIDER_API_KEY"
    )
    CHANNEL_REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0, alias="CHANNEL_REQUEST_TIMEOUT_SECONDS"
    )
    CHANNEL_CIRCUIT_FAILURE_THRESHOLD: int = Field(
        default=5, alias="CHANNEL_CIRCUIT_FAILURE_THRESHOLD"
    )
    CHANNEL_CIRCUIT_TIMEOUT_SECONDS: int = Field(
        default=60, alias="CHANNEL_CIRCUIT_TIMEOUT_SECONDS"
    )

    def provider_for(self, channel: str) -> tuple[Optional[str], Optional[str]]:
        """Return the (url, api_key) pair configured for a channel name."""
        prefix = channel.upper()
        return (
            getattr(self, f"{prefix}_PROVIDER_URL", None),
            getattr(self, f"{prefix}_PROVIDER_API_KEY", None),
        )
