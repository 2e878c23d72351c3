"""Notification dispatch models.

Pydantic models shared by the dispatch engine, the record store and the
HTTP layer. Wire names are camelCase (``notificationId``, ``inApp``);
Python code uses the snake_case field names.

Uses Pydantic BaseModel for:
- Runtime validation of send requests
- Typed template variables and action payloads (JsonValue, not Any)
- Consistent camelCase serialization for API callers
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    field_validator,
)
from pydantic.alias_generators import to_camel


class ChannelName(str, Enum):
    """Delivery channels, in canonical order."""

    IN_APP = "in_app"
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    WHATSAPP = "whatsapp"


class ChannelOutcome(str, Enum):
    """Per-channel outcome recorded on the notification."""

    SENT = "sent"
    FAILED = "failed"


class NotificationPriority(str, Enum):
    """Notification priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationStatus(str, Enum):
    """Read state of a stored notification.

    UNREAD on creation; READ and ARCHIVED are reached only through explicit
    user action. ARCHIVED is terminal.
    """

    UNREAD = "unread"
    READ = "read"
    ARCHIVED = "archived"


StatusFilter = Literal["unread", "read", "archived", "all"]


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChannelSet(CamelModel):
    """Which channels a notification goes out on.

    Missing keys are treated as disabled.
    """

    in_app: bool = False
    email: bool = False
    sms: bool = False
    push: bool = False
    whatsapp: bool = False

    @classmethod
    def system_default(cls) -> "ChannelSet":
        """Channel set used when neither the request nor a stored preference decides."""
        return cls(in_app=True, email=True, push=True, sms=False, whatsapp=False)

    def is_enabled(self, channel: ChannelName) -> bool:
        return bool(getattr(self, channel.value))

    def enabled(self) -> List[ChannelName]:
        """Enabled channel names in canonical order."""
        return [channel for channel in ChannelName if self.is_enabled(channel)]


class RelatedEntity(CamelModel):
    """Reference to the domain object a notification is about."""

    type: str
    id: str


class NotificationAction(CamelModel):
    """Optional call to action attached to a notification."""

    url: Optional[str] = None
    text: Optional[str] = None
    data: Dict[str, JsonValue] = Field(default_factory=dict)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class NotificationRequest(CamelModel):
    """Payload of a send call.

    Attributes:
        title: Fallback title used when no template matches
        message: Fallback message used when no template matches
        type: Notification type name (e.g. ``order_created``)
        priority: Priority; the configured default applies when omitted
        channels: Explicit channel set; overrides stored preferences entirely
        related_entity: Optional reference to the subject of the notification
        action: Optional call to action
        variables: Values substituted into ``{{placeholders}}``
        expires_at: When the notification becomes eligible for cleanup

    Example:
        request = NotificationRequest(
            title="New order",
            message="Order {{order_id}} was created",
            type="order_created",
            variables={"order_id": "A-1001"},
        )
    """

    title: str
    message: str
    type: str
    priority: Optional[NotificationPriority] = None
    channels: Optional[ChannelSet] = None
    related_entity: Optional[RelatedEntity] = None
    action: Optional[NotificationAction] = None
    variables: Dict[str, JsonValue] = Field(default_factory=dict)
    expires_at: Optional[datetime] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Ensure the notification type name is not blank."""
        if not v or not v.strip():
            raise ValueError("Notification type cannot be empty")
        return v

    @field_validator("expires_at")
    @classmethod
    def normalize_expires_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store expiry in UTC; naive values are taken as UTC."""
        return _as_utc(v)


class NotificationType(CamelModel):
    """Read-only catalog entry for a notification category."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    type_name: str
    display_name: str
    is_active: bool = True


class NotificationTemplate(CamelModel):
    """Subject/message template. ``tenant_id`` None marks the global template."""

    id: Optional[str] = None
    tenant_id: Optional[str] = None
    notification_type_id: Optional[str] = None
    subject_template: str = ""
    message_template: str = ""
    is_active: bool = True

    @classmethod
    def empty(cls) -> "NotificationTemplate":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.subject_template and not self.message_template


class RenderedContent(CamelModel):
    """Title and message after placeholder substitution."""

    title: str
    message: str


class NotificationPreference(CamelModel):
    """Stored channel preference of a user for one notification type."""

    notification_type_id: str
    type_name: Optional[str] = None
    display_name: Optional[str] = None
    email_enabled: bool = True
    sms_enabled: bool = False
    push_enabled: bool = True
    in_app_enabled: bool = True
    whatsapp_enabled: bool = False
    priority_level: NotificationPriority = NotificationPriority.MEDIUM

    def to_channel_set(self) -> ChannelSet:
        return ChannelSet(
            in_app=self.in_app_enabled,
            email=self.email_enabled,
            sms=self.sms_enabled,
            push=self.push_enabled,
            whatsapp=self.whatsapp_enabled,
        )


class PreferenceUpdate(CamelModel):
    """Partial preference upsert; None leaves the stored value untouched."""

    notification_type_id: str
    email_enabled: Optional[bool] = None
    sms_enabled: Optional[bool] = None
    push_enabled: Optional[bool] = None
    in_app_enabled: Optional[bool] = None
    whatsapp_enabled: Optional[bool] = None
    priority_level: Optional[NotificationPriority] = None


class NotificationDraft(CamelModel):
    """Notification as inserted before any channel is attempted."""

    tenant_id: str
    user_id: str
    title: str
    message: str
    notification_type_id: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    channels: List[ChannelName] = Field(default_factory=list)
    related_entity: Optional[RelatedEntity] = None
    action: Optional[NotificationAction] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NotificationRecord(CamelModel):
    """Stored notification as returned to callers."""

    id: str
    tenant_id: str
    user_id: str
    title: str
    message: str
    notification_type_id: str
    type_name: Optional[str] = None
    priority: NotificationPriority
    status: NotificationStatus
    channels: List[ChannelName] = Field(default_factory=list)
    channel_status: Dict[ChannelName, ChannelOutcome] = Field(default_factory=dict)
    related_entity: Optional[RelatedEntity] = None
    action: Optional[NotificationAction] = None
    expires_at: Optional[datetime] = None
    created_at: datetime
    sent_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None


class NotificationQuery(CamelModel):
    """Filters and pagination for listing a user's notifications."""

    status: StatusFilter = "all"
    type: Optional[str] = None
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class NotificationPage(CamelModel):
    """One page of notifications plus the unpaginated total."""

    notifications: List[NotificationRecord]
    total: int


class ChannelDelivery(CamelModel):
    """Content handed to one channel adapter."""

    notification_id: str
    user_id: str
    tenant_id: str
    channel: ChannelName
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    variables: Dict[str, JsonValue] = Field(default_factory=dict)


class ChannelResult(CamelModel):
    """Outcome of a single channel attempt.

    Attributes:
        channel: Channel attempted
        outcome: SENT or FAILED
        message: Human-readable result message
        error_code: Machine error code for failures (TIMEOUT, CIRCUIT_OPEN, ...)
        external_id: Provider message id when the provider returned one
    """

    channel: ChannelName
    outcome: ChannelOutcome
    message: str = ""
    error_code: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.outcome == ChannelOutcome.SENT

    @classmethod
    def sent(
        cls, channel: ChannelName, message: str, external_id: Optional[str] = None
    ) -> "ChannelResult":
        return cls(
            channel=channel,
            outcome=ChannelOutcome.SENT,
            message=message,
            external_id=external_id,
        )

    @classmethod
    def failed(
        cls, channel: ChannelName, message: str, error_code: Optional[str] = None
    ) -> "ChannelResult":
        return cls(
            channel=channel,
            outcome=ChannelOutcome.FAILED,
            message=message,
            error_code=error_code,
        )


class DispatchResult(CamelModel):
    """Caller-visible result of a single send."""

    success: bool
    notification_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    channel_status: Dict[ChannelName, ChannelOutcome] = Field(default_factory=dict)


class UserDispatchResult(CamelModel):
    """Per-recipient entry of a bulk send."""

    user_id: str
    success: bool
    notification_id: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


class BulkDispatchResult(CamelModel):
    """Result of a bulk send; success when any recipient succeeded."""

    success: bool
    results: List[UserDispatchResult] = Field(default_factory=list)
