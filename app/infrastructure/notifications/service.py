"""Notification service for dependency injection.

Provides a class-based interface to the dispatch engine and the record store
for the API layer, the scheduled jobs and other in-process callers.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.provider import HttpProviderChannel
from infrastructure.notifications.dispatcher import ChannelDispatcher
from infrastructure.notifications.errors import NotificationError, ValidationError
from infrastructure.notifications.models import (
    BulkDispatchResult,
    ChannelName,
    DispatchResult,
    NotificationPage,
    NotificationPreference,
    NotificationPriority,
    NotificationQuery,
    NotificationRequest,
    NotificationType,
    PreferenceUpdate,
)
from infrastructure.notifications.orchestrator import DispatchOrchestrator
from infrastructure.notifications.preferences import PreferenceResolver
from infrastructure.notifications.registry import NotificationTypeRegistry
from infrastructure.notifications.store import NotificationRecordStore
from infrastructure.notifications.templates import TemplateResolver
from infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    register_circuit_breaker,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()

EXTERNAL_CHANNELS = (
    ChannelName.EMAIL,
    ChannelName.SMS,
    ChannelName.PUSH,
    ChannelName.WHATSAPP,
)


def build_provider_channels(settings: "Settings") -> Dict[ChannelName, NotificationChannel]:
    """Create one HTTP provider channel per external channel.

    Each channel gets its own circuit breaker, registered for monitoring.
    Provider requests never outlive the dispatch deadline.
    """
    channel_settings = settings.channels
    request_timeout = min(
        channel_settings.CHANNEL_REQUEST_TIMEOUT_SECONDS,
        settings.dispatch.DISPATCH_CHANNEL_TIMEOUT_SECONDS,
    )
    channels: Dict[ChannelName, NotificationChannel] = {}
    for channel_name in EXTERNAL_CHANNELS:
        provider_url, api_key = channel_settings.provider_for(channel_name.value)
        circuit_breaker = CircuitBreaker(
            name=f"notification_{channel_name.value}",
            failure_threshold=channel_settings.CHANNEL_CIRCUIT_FAILURE_THRESHOLD,
            timeout_seconds=channel_settings.CHANNEL_CIRCUIT_TIMEOUT_SECONDS,
        )
        register_circuit_breaker(circuit_breaker)
        channels[channel_name] = HttpProviderChannel(
            channel=channel_name,
            provider_url=provider_url,
            api_key=api_key,
            timeout_seconds=request_timeout,
            circuit_breaker=circuit_breaker,
        )
    return channels


class NotificationService:
    """Class-based notification service.

    Thin facade over DispatchOrchestrator and NotificationRecordStore. Send
    operations never raise engine errors: they come back as
    ``success=False`` results. Read and state-change operations propagate
    PersistenceError.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.post("/send")
        def send(service: NotificationServiceDep, payload: NotificationRequest):
            return service.send_notification(user_id, tenant_id, payload)

        # Direct instantiation
        service = NotificationService(settings, store)
        result = service.send_notification("u-1", "t-1", request)
    """

    def __init__(
        self,
        settings: "Settings",
        store: NotificationRecordStore,
        channels: Optional[Dict[ChannelName, NotificationChannel]] = None,
        dispatcher: Optional[ChannelDispatcher] = None,
        orchestrator: Optional[DispatchOrchestrator] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Settings instance (required, passed from provider).
            store: Record store bound to the notification database.
            channels: Optional external channel adapters. If not provided,
                one HTTP provider channel is created per external channel.
            dispatcher: Optional pre-configured ChannelDispatcher.
            orchestrator: Optional pre-configured DispatchOrchestrator.
        """
        self._settings = settings
        self._store = store
        self._registry = NotificationTypeRegistry(store)
        self._preferences = PreferenceResolver(store)
        self._templates = TemplateResolver(store)

        if orchestrator is None:
            if dispatcher is None:
                if channels is None:
                    channels = build_provider_channels(settings)
                dispatcher = ChannelDispatcher(
                    channels=channels,
                    channel_timeout_seconds=settings.dispatch.DISPATCH_CHANNEL_TIMEOUT_SECONDS,
                )
            orchestrator = DispatchOrchestrator(
                store=store,
                registry=self._registry,
                preferences=self._preferences,
                templates=self._templates,
                dispatcher=dispatcher,
                default_priority=NotificationPriority(
                    settings.dispatch.DISPATCH_DEFAULT_PRIORITY
                ),
                max_bulk_workers=settings.dispatch.DISPATCH_MAX_BULK_WORKERS,
            )

        self._orchestrator = orchestrator
        self._dispatcher = dispatcher

    def send_notification(
        self, user_id: str, tenant_id: str, request: NotificationRequest
    ) -> DispatchResult:
        try:
            return self._orchestrator.send(user_id, tenant_id, request)
        except NotificationError as e:
            logger.warning(
                "notification_send_failed",
                user_id=user_id,
                tenant_id=tenant_id,
                notification_type=request.type,
                error=str(e),
            )
            return DispatchResult(success=False, error=str(e), error_code=e.error_code)

    def send_bulk_notifications(
        self, user_ids: Sequence[str], tenant_id: str, request: NotificationRequest
    ) -> BulkDispatchResult:
        return self._orchestrator.send_bulk(user_ids, tenant_id, request)

    def get_user_notifications(
        self,
        user_id: str,
        tenant_id: str,
        query: Optional[NotificationQuery] = None,
    ) -> NotificationPage:
        items, total = self._store.list_for_user(user_id, tenant_id, query)
        return NotificationPage(notifications=items, total=total)

    def get_unread_count(self, user_id: str, tenant_id: str) -> int:
        return self._store.count_unread(user_id, tenant_id)

    def mark_as_read(
        self,
        user_id: str,
        tenant_id: str,
        notification_ids: Optional[Sequence[str]] = None,
    ) -> int:
        """Mark notifications read; all unread ones when no ids are given."""
        count = self._store.mark_read(user_id, tenant_id, notification_ids)
        logger.info(
            "notifications_marked_read",
            user_id=user_id,
            tenant_id=tenant_id,
            count=count,
        )
        return count

    def archive(
        self, user_id: str, tenant_id: str, notification_ids: Sequence[str]
    ) -> int:
        if not notification_ids:
            raise ValidationError("notification_ids cannot be empty", field="ids")
        count = self._store.archive(user_id, tenant_id, notification_ids)
        logger.info(
            "notifications_archived",
            user_id=user_id,
            tenant_id=tenant_id,
            count=count,
        )
        return count

    def get_user_preferences(
        self,
        user_id: str,
        tenant_id: str,
        notification_type_id: Optional[str] = None,
    ) -> List[NotificationPreference]:
        return self._preferences.get_user_preferences(
            user_id, tenant_id, notification_type_id
        )

    def update_preferences(
        self,
        user_id: str,
        tenant_id: str,
        preferences: Sequence[PreferenceUpdate],
    ) -> bool:
        """Upsert preferences; False when the store rejected the write."""
        try:
            self._preferences.update_preferences(user_id, tenant_id, preferences)
        except NotificationError as e:
            logger.error(
                "preferences_update_failed",
                user_id=user_id,
                tenant_id=tenant_id,
                error=str(e),
            )
            return False
        return True

    def list_types(self) -> List[NotificationType]:
        return self._registry.list_types()

    def cleanup_expired(self) -> int:
        count = self._store.cleanup_expired()
        logger.info("expired_notifications_deleted", count=count)
        return count

    def channel_health(self) -> Dict[ChannelName, bool]:
        if self._dispatcher is None:
            return {}
        return self._dispatcher.health_check()

    def shutdown(self) -> None:
        self._orchestrator.shutdown()

    @property
    def orchestrator(self) -> DispatchOrchestrator:
        return self._orchestrator
