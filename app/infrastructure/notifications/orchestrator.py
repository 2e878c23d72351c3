"""Dispatch orchestrator.

Sequences a single send:

    resolve type -> resolve channels -> resolve + render template
        -> persist draft -> fan out -> persist channel status

Anything that fails before the draft row exists fails the call and no
channel is attempted. Once the draft exists the call succeeds whatever the
channel outcomes are; a failure to store the final channel status is logged
and the stored record is left behind the delivered state.
"""

import contextvars
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.notifications.dispatcher import ChannelDispatcher, to_channel_status
from infrastructure.notifications.errors import NotificationError, ValidationError
from infrastructure.notifications.models import (
    BulkDispatchResult,
    DispatchResult,
    NotificationDraft,
    NotificationPriority,
    NotificationRequest,
    RenderedContent,
    UserDispatchResult,
)
from infrastructure.notifications.preferences import PreferenceResolver
from infrastructure.notifications.registry import NotificationTypeRegistry
from infrastructure.notifications.store import NotificationRecordStore
from infrastructure.notifications.templates import TemplateResolver

logger = get_module_logger()


def _require(value: str, field: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{field} cannot be empty", field=field)


class DispatchOrchestrator:
    """Entry point for single and bulk notification sends.

    Args:
        store: Record store for drafts and channel status
        registry: Notification type lookup
        preferences: Channel preference resolution
        templates: Template lookup and rendering
        dispatcher: Channel fan-out
        default_priority: Priority used when a request does not set one
        max_bulk_workers: Recipients processed concurrently by send_bulk
    """

    def __init__(
        self,
        store: NotificationRecordStore,
        registry: NotificationTypeRegistry,
        preferences: PreferenceResolver,
        templates: TemplateResolver,
        dispatcher: ChannelDispatcher,
        default_priority: NotificationPriority = NotificationPriority.MEDIUM,
        max_bulk_workers: int = 8,
    ):
        self._store = store
        self._registry = registry
        self._preferences = preferences
        self._templates = templates
        self._dispatcher = dispatcher
        self._default_priority = default_priority
        self._bulk_executor = ThreadPoolExecutor(
            max_workers=max_bulk_workers, thread_name_prefix="bulk-dispatch"
        )

    def send(
        self, user_id: str, tenant_id: str, request: NotificationRequest
    ) -> DispatchResult:
        """Create one notification for one user and deliver it.

        Raises:
            ValidationError: Blank user or tenant id
            NotFoundError: Unknown or inactive notification type
            PersistenceError: The draft could not be stored
        """
        _require(user_id, "user_id")
        _require(tenant_id, "tenant_id")

        with bind_request_context(
            user_id=user_id, tenant_id=tenant_id, notification_type=request.type
        ):
            notification_type = self._registry.resolve_type(request.type)

            channel_set = self._preferences.resolve_channels(
                user_id, tenant_id, notification_type.id, request.channels
            )

            template = self._templates.resolve_template(tenant_id, notification_type.id)
            rendered = self._templates.render(template, request.variables)
            content = RenderedContent(
                title=rendered.title or request.title,
                message=rendered.message or request.message,
            )

            priority = request.priority or self._default_priority
            enabled = channel_set.enabled()
            notification_id = self._store.create(
                NotificationDraft(
                    tenant_id=tenant_id,
                    user_id=user_id,
                    title=content.title,
                    message=content.message,
                    notification_type_id=notification_type.id,
                    priority=priority,
                    channels=enabled,
                    related_entity=request.related_entity,
                    action=request.action,
                    expires_at=request.expires_at,
                )
            )
            logger.info(
                "notification_created",
                notification_id=notification_id,
                channels=[channel.value for channel in enabled],
                priority=priority.value,
                templated=not template.is_empty,
            )

            results = self._dispatcher.dispatch(
                notification_id,
                channel_set,
                content,
                request.variables,
                user_id=user_id,
                tenant_id=tenant_id,
                priority=priority,
            )
            channel_status = to_channel_status(results)

            try:
                self._store.update_channel_status(
                    notification_id, channel_status, datetime.now(timezone.utc)
                )
            except NotificationError as e:
                logger.error(
                    "channel_status_update_failed",
                    notification_id=notification_id,
                    error=str(e),
                    exc_info=True,
                )

            return DispatchResult(
                success=True,
                notification_id=notification_id,
                channel_status=channel_status,
            )

    def send_bulk(
        self,
        user_ids: Sequence[str],
        tenant_id: str,
        request: NotificationRequest,
    ) -> BulkDispatchResult:
        """Send the same notification to each user independently.

        One user's failure never prevents the others from being attempted.
        Results keep the order of ``user_ids``; overall success means at
        least one user succeeded.
        """
        futures = [
            self._bulk_executor.submit(
                contextvars.copy_context().run,
                self._send_for_user,
                user_id,
                tenant_id,
                request,
            )
            for user_id in user_ids
        ]
        results: List[UserDispatchResult] = [future.result() for future in futures]

        succeeded = sum(1 for result in results if result.success)
        logger.info(
            "bulk_notification_sent",
            tenant_id=tenant_id,
            notification_type=request.type,
            recipient_count=len(results),
            success_count=succeeded,
        )
        return BulkDispatchResult(success=succeeded > 0, results=results)

    def _send_for_user(
        self, user_id: str, tenant_id: str, request: NotificationRequest
    ) -> UserDispatchResult:
        error: Optional[str] = None
        error_code: Optional[str] = None
        try:
            result = self.send(user_id, tenant_id, request)
            return UserDispatchResult(
                user_id=user_id,
                success=True,
                notification_id=result.notification_id,
            )
        except NotificationError as e:
            error = str(e)
            error_code = e.error_code
            logger.warning(
                "bulk_recipient_failed",
                user_id=user_id,
                tenant_id=tenant_id,
                error=error,
            )
        except Exception as e:
            error = f"Unexpected error: {e}"
            error_code = "INTERNAL_ERROR"
            logger.error(
                "bulk_recipient_error",
                user_id=user_id,
                tenant_id=tenant_id,
                error=str(e),
                exc_info=True,
            )
        return UserDispatchResult(
            user_id=user_id, success=False, error=error, error_code=error_code
        )

    def shutdown(self) -> None:
        self._bulk_executor.shutdown(wait=False, cancel_futures=True)
