"""Request and response bodies of the notifications API."""

from typing import List, Optional

from pydantic import Field

from infrastructure.notifications.models import (
    CamelModel,
    ChannelName,
    NotificationRequest,
    PreferenceUpdate,
)


class SendRequest(NotificationRequest):
    """Send payload; the recipient defaults to the caller."""

    user_id: Optional[str] = None


class BulkSendRequest(CamelModel):
    """Same notification for several users of the caller's tenant."""

    user_ids: List[str] = Field(..., min_length=1)
    notification: NotificationRequest


class MarkReadRequest(CamelModel):
    """Ids to mark read; omit to mark every unread notification."""

    notification_ids: Optional[List[str]] = None


class ArchiveRequest(CamelModel):
    notification_ids: List[str] = Field(..., min_length=1)


class UpdatePreferencesRequest(CamelModel):
    preferences: List[PreferenceUpdate] = Field(..., min_length=1)


class CountResponse(CamelModel):
    count: int


class SuccessResponse(CamelModel):
    success: bool


class ChannelHealthResponse(CamelModel):
    channels: dict[ChannelName, bool]
    healthy: bool
