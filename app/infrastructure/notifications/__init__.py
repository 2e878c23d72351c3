"""Multi-channel notification dispatch engine.

Turns one "notify user X about event Y" request into a stored notification
plus one delivery attempt per enabled channel (in-app, email, SMS, push,
WhatsApp), with:
- Channel selection: explicit request, else stored preference, else default
- Tenant-over-global template lookup and ``{{placeholder}}`` rendering
- Parallel, failure-isolated channel fan-out
- Per-channel sent/failed status recorded on the notification

Usage:
    from infrastructure.notifications import NotificationRequest
    from infrastructure.services import get_notification_service

    service = get_notification_service()
    result = service.send_notification(
        "user-1",
        "tenant-1",
        NotificationRequest(
            title="New order",
            message="Order {{order_id}} was created",
            type="order_created",
            variables={"order_id": "A-1001"},
        ),
    )
    if result.success:
        logger.info("notification_sent", notification_id=result.notification_id)
"""

# Models
from infrastructure.notifications.models import (
    BulkDispatchResult,
    ChannelName,
    ChannelOutcome,
    ChannelResult,
    ChannelSet,
    DispatchResult,
    NotificationAction,
    NotificationPage,
    NotificationPreference,
    NotificationPriority,
    NotificationQuery,
    NotificationRecord,
    NotificationRequest,
    NotificationStatus,
    NotificationTemplate,
    NotificationType,
    PreferenceUpdate,
    RelatedEntity,
    UserDispatchResult,
)

# Errors
from infrastructure.notifications.errors import (
    ChannelDeliveryError,
    NotFoundError,
    NotificationError,
    PersistenceError,
    ValidationError,
)

# Engine components
from infrastructure.notifications.registry import NotificationTypeRegistry
from infrastructure.notifications.preferences import PreferenceResolver
from infrastructure.notifications.templates import TemplateResolver, render
from infrastructure.notifications.store import NotificationRecordStore
from infrastructure.notifications.dispatcher import ChannelDispatcher
from infrastructure.notifications.orchestrator import DispatchOrchestrator
from infrastructure.notifications.service import NotificationService

# Channels
from infrastructure.notifications.channels import (
    HttpProviderChannel,
    InAppChannel,
    NotificationChannel,
)

__all__ = [
    # Models
    "BulkDispatchResult",
    "ChannelName",
    "ChannelOutcome",
    "ChannelResult",
    "ChannelSet",
    "DispatchResult",
    "NotificationAction",
    "NotificationPage",
    "NotificationPreference",
    "NotificationPriority",
    "NotificationQuery",
    "NotificationRecord",
    "NotificationRequest",
    "NotificationStatus",
    "NotificationTemplate",
    "NotificationType",
    "PreferenceUpdate",
    "RelatedEntity",
    "UserDispatchResult",
    # Errors
    "ChannelDeliveryError",
    "NotFoundError",
    "NotificationError",
    "PersistenceError",
    "ValidationError",
    # Engine components
    "NotificationTypeRegistry",
    "PreferenceResolver",
    "TemplateResolver",
    "render",
    "NotificationRecordStore",
    "ChannelDispatcher",
    "DispatchOrchestrator",
    "NotificationService",
    # Channels
    "NotificationChannel",
    "InAppChannel",
    "HttpProviderChannel",
]
