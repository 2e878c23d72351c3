"""Notifications API.

Caller identity comes from the ``X-User-Id`` / ``X-Tenant-Id`` headers.
Engine errors raised by read and state-change operations are turned into
HTTP responses by the handlers in ``api.errors``.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from api.dependencies.identity import CallerDep, TenantDep
from api.dependencies.rate_limits import get_limiter
from api.errors import status_for
from api.v1.schemas import (
    ArchiveRequest,
    BulkSendRequest,
    ChannelHealthResponse,
    CountResponse,
    MarkReadRequest,
    SendRequest,
    SuccessResponse,
    UpdatePreferencesRequest,
)
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.notifications.models import (
    BulkDispatchResult,
    DispatchResult,
    NotificationPage,
    NotificationPreference,
    NotificationQuery,
    NotificationType,
    StatusFilter,
)
from infrastructure.services import NotificationServiceDep

logger = get_module_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])
limiter = get_limiter()


@router.post("/send", response_model=DispatchResult, status_code=201)
@limiter.limit("120/minute")
def send_notification(
    request: Request,  # pylint: disable=unused-argument
    payload: SendRequest,
    caller: CallerDep,
    service: NotificationServiceDep,
):
    """Create a notification for one user of the caller's tenant and deliver it.

    The recipient is ``userId`` from the body, or the caller when omitted.
    """
    recipient = caller.user_id if payload.user_id is None else payload.user_id
    with bind_request_context(
        correlation_id=request.headers.get("X-Correlation-ID"),
        user_id=recipient,
        tenant_id=caller.tenant_id,
    ):
        result = service.send_notification(recipient, caller.tenant_id, payload)
    if not result.success:
        return JSONResponse(
            status_code=status_for(result.error_code),
            content=result.model_dump(mode="json", by_alias=True),
        )
    return result


@router.post("/send/bulk", response_model=BulkDispatchResult)
@limiter.limit("30/minute")
def send_bulk_notifications(
    request: Request,  # pylint: disable=unused-argument
    payload: BulkSendRequest,
    tenant_id: TenantDep,
    service: NotificationServiceDep,
):
    """Send one notification to several users; per-user results are isolated."""
    with bind_request_context(
        correlation_id=request.headers.get("X-Correlation-ID"),
        tenant_id=tenant_id,
    ):
        return service.send_bulk_notifications(
            payload.user_ids, tenant_id, payload.notification
        )


@router.get("", response_model=NotificationPage)
def list_notifications(
    caller: CallerDep,
    service: NotificationServiceDep,
    status: StatusFilter = "all",
    type: Optional[str] = None,  # pylint: disable=redefined-builtin
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Newest-first page of the caller's notifications."""
    query = NotificationQuery(status=status, type=type, limit=limit, offset=offset)
    return service.get_user_notifications(caller.user_id, caller.tenant_id, query)


@router.get("/unread-count", response_model=CountResponse)
def get_unread_count(caller: CallerDep, service: NotificationServiceDep):
    return CountResponse(
        count=service.get_unread_count(caller.user_id, caller.tenant_id)
    )


@router.post("/read", response_model=CountResponse)
def mark_as_read(
    caller: CallerDep,
    service: NotificationServiceDep,
    payload: Optional[MarkReadRequest] = None,
):
    """Mark the given notifications read, or all unread ones without a body."""
    ids = payload.notification_ids if payload else None
    return CountResponse(
        count=service.mark_as_read(caller.user_id, caller.tenant_id, ids)
    )


@router.post("/archive", response_model=CountResponse)
def archive_notifications(
    payload: ArchiveRequest,
    caller: CallerDep,
    service: NotificationServiceDep,
):
    return CountResponse(
        count=service.archive(
            caller.user_id, caller.tenant_id, payload.notification_ids
        )
    )


@router.get("/preferences", response_model=List[NotificationPreference])
def get_preferences(
    caller: CallerDep,
    service: NotificationServiceDep,
    notification_type_id: Annotated[
        Optional[str], Query(alias="notificationTypeId")
    ] = None,
):
    return service.get_user_preferences(
        caller.user_id, caller.tenant_id, notification_type_id
    )


@router.put("/preferences", response_model=SuccessResponse)
def update_preferences(
    payload: UpdatePreferencesRequest,
    caller: CallerDep,
    service: NotificationServiceDep,
):
    success = service.update_preferences(
        caller.user_id, caller.tenant_id, payload.preferences
    )
    if not success:
        return JSONResponse(status_code=503, content={"success": False})
    return SuccessResponse(success=True)


@router.get("/types", response_model=List[NotificationType])
def list_notification_types(service: NotificationServiceDep):
    return service.list_types()


@router.get("/channels/health", response_model=ChannelHealthResponse)
def get_channel_health(service: NotificationServiceDep):
    channels = service.channel_health()
    return ChannelHealthResponse(channels=channels, healthy=all(channels.values()))
