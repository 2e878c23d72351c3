"""SQLAlchemy table mappings for the notification store.

Column names are the storage contract shared with the other services that
read and write these tables; keep them stable.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for notification tables."""


class NotificationTypeRow(Base):
    """Catalog of notification categories (seeded by migration)."""

    __tablename__ = "notification_types"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    type_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class NotificationTemplateRow(Base):
    """Subject/message template; tenant_id NULL marks the global template."""

    __tablename__ = "notification_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    tenant_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    notification_type_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("notification_types.id"), nullable=False
    )
    subject_template: Mapped[str] = mapped_column(Text, nullable=False, default="")
    message_template: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index(
            "idx_notification_templates_lookup",
            "tenant_id",
            "notification_type_id",
            "is_active",
        ),
    )


class NotificationPreferenceRow(Base):
    """Per user, tenant and type channel switches."""

    __tablename__ = "notification_preferences"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    notification_type_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("notification_types.id"), primary_key=True
    )
    email_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sms_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    push_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    in_app_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    whatsapp_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    priority_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default="medium"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    notification_type: Mapped[NotificationTypeRow] = relationship(lazy="joined")


class NotificationRow(Base):
    """One row per logical notification per recipient."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    tenant_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    notification_type_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("notification_types.id"), nullable=False
    )
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="unread")
    channels: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    channel_status: Mapped[Dict[str, str]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    related_entity_type: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True
    )
    related_entity_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    action_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    action_text: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    action_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    sent_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    read_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    archived_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    notification_type: Mapped[NotificationTypeRow] = relationship(lazy="joined")

    __table_args__ = (
        Index(
            "idx_notifications_owner_status",
            "tenant_id",
            "user_id",
            "status",
        ),
        Index("idx_notifications_created_at", "created_at"),
        Index("idx_notifications_expires_at", "expires_at"),
    )
