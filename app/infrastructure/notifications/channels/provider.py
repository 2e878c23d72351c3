"""HTTP provider channel.

Delivers email, SMS, push and WhatsApp notifications by posting a JSON
payload to the configured provider endpoint. The provider owns recipient
address lookup (user id to email, phone number or device token) and any
retry policy of its own; this adapter makes a single attempt.

Payload:
    {
        "notification_id": "...",
        "channel": "email",
        "user_id": "...",
        "tenant_id": "...",
        "subject": "...",
        "message": "...",
        "priority": "medium",
        "variables": {...}
    }
"""

from typing import Optional

import requests

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import ChannelDelivery, ChannelName, ChannelResult
from infrastructure.operations import OperationResult, classify_http_error
from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
)

logger = get_module_logger()


class HttpProviderChannel(NotificationChannel):
    """Channel that hands deliveries to an external HTTP provider.

    Args:
        channel: Channel this adapter serves (any channel except in-app)
        provider_url: Provider endpoint; None leaves the channel unconfigured
        api_key: Bearer token sent in the Authorization header
        timeout_seconds: Request timeout
        circuit_breaker: Breaker guarding the provider; one is created if omitted
        session: requests session (injected by tests)
    """

    def __init__(
        self,
        channel: ChannelName,
        provider_url: Optional[str],
        api_key: Optional[str] = None,
        timeout_seconds: float = 30.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        session: Optional[requests.Session] = None,
    ):
        if channel == ChannelName.IN_APP:
            raise ValueError("In-app delivery does not use an HTTP provider")

        self._channel = channel
        self._provider_url = provider_url
        self._timeout = timeout_seconds
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            name=f"notification_{channel.value}"
        )

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": "Notification-Dispatch/1.0",
                "Accept": "application/json",
            }
        )
        if api_key:
            self._session.headers["Authorization"] = f"Bearer {api_key}"

        logger.info(
            "initialized_provider_channel",
            channel=channel.value,
            configured=self.is_configured,
        )

    @property
    def channel_name(self) -> ChannelName:
        return self._channel

    @property
    def is_configured(self) -> bool:
        return bool(self._provider_url)

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._circuit_breaker

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def send(self, delivery: ChannelDelivery) -> ChannelResult:
        if not self.is_configured:
            logger.warning(
                "channel_not_configured",
                channel=self._channel.value,
                notification_id=delivery.notification_id,
            )
            return self.failed(
                f"No provider configured for {self._channel.value}",
                error_code="NOT_CONFIGURED",
            )

        try:
            result = self._circuit_breaker.call(self._post, delivery)
        except CircuitBreakerOpenError as e:
            return self.failed(str(e), error_code="CIRCUIT_OPEN")

        if result.is_success:
            external_id = (result.data or {}).get("id")
            logger.info(
                "channel_send_succeeded",
                channel=self._channel.value,
                notification_id=delivery.notification_id,
                external_id=external_id,
            )
            return self.sent(result.message, external_id=external_id)

        logger.error(
            "channel_send_failed",
            channel=self._channel.value,
            notification_id=delivery.notification_id,
            error=result.message,
            error_code=result.error_code,
            transient=result.is_transient,
            retry_after=result.retry_after,
        )
        return self.failed(result.message, error_code=result.error_code)

    def health_check(self) -> OperationResult:
        if not self.is_configured:
            return OperationResult.permanent_error(
                message=f"No provider configured for {self._channel.value}",
                error_code="NOT_CONFIGURED",
            )
        stats = self._circuit_breaker.get_stats()
        if stats["state"] == "open":
            return OperationResult.transient_error(
                message=f"Circuit open for {self._channel.value}",
                error_code="CIRCUIT_OPEN",
            )
        return OperationResult.success(
            message="Provider configured",
            data={"provider_url": self._provider_url, "circuit": stats["state"]},
        )

    def _post(self, delivery: ChannelDelivery) -> OperationResult:
        payload = {
            "notification_id": delivery.notification_id,
            "channel": self._channel.value,
            "user_id": delivery.user_id,
            "tenant_id": delivery.tenant_id,
            "subject": delivery.title,
            "message": delivery.message,
            "priority": delivery.priority.value,
            "variables": delivery.variables,
        }
        try:
            response = self._session.post(
                self._provider_url, json=payload, timeout=self._timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            return classify_http_error(e)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        return OperationResult.success(
            message=f"Accepted by {self._channel.value} provider",
            data={"id": body.get("id")},
        )
