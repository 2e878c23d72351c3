"""Notification record store backed by SQLAlchemy.

Reads the notification catalog (types, templates, preferences) and owns the
``notifications`` table. Every public method runs in its own session and
transaction, so one store instance can be shared by the channel and bulk
worker threads. SQLAlchemy errors never escape: they are rolled back and
re-raised as PersistenceError.

Concurrent writers touch disjoint columns: channel status updates write
``channel_status``/``sent_at`` while read/archive transitions write
``status``/``read_at``/``archived_at``, so neither overwrites the other.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import NotFoundError, PersistenceError
from infrastructure.notifications.models import (
    ChannelName,
    ChannelOutcome,
    NotificationAction,
    NotificationDraft,
    NotificationPreference,
    NotificationQuery,
    NotificationRecord,
    NotificationStatus,
    NotificationTemplate,
    NotificationType,
    PreferenceUpdate,
    RelatedEntity,
)
from infrastructure.persistence.models import (
    NotificationPreferenceRow,
    NotificationRow,
    NotificationTemplateRow,
    NotificationTypeRow,
)

logger = get_module_logger()


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _to_type(row: NotificationTypeRow) -> NotificationType:
    return NotificationType(
        id=row.id,
        type_name=row.type_name,
        display_name=row.display_name,
        is_active=row.is_active,
    )


def _to_template(row: NotificationTemplateRow) -> NotificationTemplate:
    return NotificationTemplate(
        id=row.id,
        tenant_id=row.tenant_id,
        notification_type_id=row.notification_type_id,
        subject_template=row.subject_template or "",
        message_template=row.message_template or "",
        is_active=row.is_active,
    )


def _to_preference(row: NotificationPreferenceRow) -> NotificationPreference:
    return NotificationPreference(
        notification_type_id=row.notification_type_id,
        type_name=row.notification_type.type_name if row.notification_type else None,
        display_name=(
            row.notification_type.display_name if row.notification_type else None
        ),
        email_enabled=row.email_enabled,
        sms_enabled=row.sms_enabled,
        push_enabled=row.push_enabled,
        in_app_enabled=row.in_app_enabled,
        whatsapp_enabled=row.whatsapp_enabled,
        priority_level=row.priority_level,
    )


def _to_record(row: NotificationRow) -> NotificationRecord:
    related_entity = None
    if row.related_entity_type and row.related_entity_id:
        related_entity = RelatedEntity(
            type=row.related_entity_type, id=row.related_entity_id
        )

    action = None
    if row.action_url or row.action_text or row.action_data:
        action = NotificationAction(
            url=row.action_url,
            text=row.action_text,
            data=row.action_data or {},
        )

    return NotificationRecord(
        id=row.id,
        tenant_id=row.tenant_id,
        user_id=row.user_id,
        title=row.title,
        message=row.message,
        notification_type_id=row.notification_type_id,
        type_name=row.notification_type.type_name if row.notification_type else None,
        priority=row.priority,
        status=row.status,
        channels=row.channels or [],
        channel_status=row.channel_status or {},
        related_entity=related_entity,
        action=action,
        expires_at=_aware(row.expires_at),
        created_at=_aware(row.created_at),
        sent_at=_aware(row.sent_at),
        read_at=_aware(row.read_at),
        archived_at=_aware(row.archived_at),
    )


class NotificationRecordStore:
    """Read/write contract over the notification tables.

    Args:
        session_factory: sessionmaker bound to the notification database

    Example:
        engine = build_engine("sqlite:///./notifications.db")
        create_schema(engine)
        store = NotificationRecordStore(build_session_factory(engine))

        notification_id = store.create(draft)
        store.update_channel_status(notification_id, {ChannelName.IN_APP: ChannelOutcome.SENT})
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def _fail(self, operation: str, exc: SQLAlchemyError) -> PersistenceError:
        logger.error(
            "notification_store_error",
            operation=operation,
            error=str(exc),
            exc_info=True,
        )
        return PersistenceError(f"Failed to {operation.replace('_', ' ')}: {exc}", operation)

    # Catalog

    def get_active_type(self, type_name: str) -> Optional[NotificationType]:
        """Active notification type with exactly this name, or None."""
        try:
            with self._session_factory() as session:
                row = session.scalars(
                    select(NotificationTypeRow).where(
                        NotificationTypeRow.type_name == type_name,
                        NotificationTypeRow.is_active.is_(True),
                    )
                ).first()
                return _to_type(row) if row else None
        except SQLAlchemyError as e:
            raise self._fail("get_notification_type", e) from e

    def list_active_types(self) -> List[NotificationType]:
        try:
            with self._session_factory() as session:
                rows = session.scalars(
                    select(NotificationTypeRow)
                    .where(NotificationTypeRow.is_active.is_(True))
                    .order_by(NotificationTypeRow.type_name)
                ).all()
                return [_to_type(row) for row in rows]
        except SQLAlchemyError as e:
            raise self._fail("list_notification_types", e) from e

    def find_template(
        self, tenant_id: Optional[str], notification_type_id: str
    ) -> Optional[NotificationTemplate]:
        """Active template for a tenant, or the global one when tenant_id is None."""
        if tenant_id is None:
            tenant_clause = NotificationTemplateRow.tenant_id.is_(None)
        else:
            tenant_clause = NotificationTemplateRow.tenant_id == tenant_id

        try:
            with self._session_factory() as session:
                row = session.scalars(
                    select(NotificationTemplateRow)
                    .where(
                        tenant_clause,
                        NotificationTemplateRow.notification_type_id
                        == notification_type_id,
                        NotificationTemplateRow.is_active.is_(True),
                    )
                    .order_by(NotificationTemplateRow.created_at.desc())
                ).first()
                return _to_template(row) if row else None
        except SQLAlchemyError as e:
            raise self._fail("get_template", e) from e

    def find_preference(
        self, user_id: str, tenant_id: str, notification_type_id: str
    ) -> Optional[NotificationPreference]:
        try:
            with self._session_factory() as session:
                row = session.get(
                    NotificationPreferenceRow,
                    (user_id, tenant_id, notification_type_id),
                )
                return _to_preference(row) if row else None
        except SQLAlchemyError as e:
            raise self._fail("get_preference", e) from e

    def list_preferences(
        self,
        user_id: str,
        tenant_id: str,
        notification_type_id: Optional[str] = None,
    ) -> List[NotificationPreference]:
        """Stored preferences of a user, joined with their notification type."""
        stmt = select(NotificationPreferenceRow).where(
            NotificationPreferenceRow.user_id == user_id,
            NotificationPreferenceRow.tenant_id == tenant_id,
        )
        if notification_type_id:
            stmt = stmt.where(
                NotificationPreferenceRow.notification_type_id == notification_type_id
            )

        try:
            with self._session_factory() as session:
                rows = session.scalars(stmt).all()
                return [_to_preference(row) for row in rows]
        except SQLAlchemyError as e:
            raise self._fail("list_preferences", e) from e

    def upsert_preferences(
        self,
        user_id: str,
        tenant_id: str,
        updates: Sequence[PreferenceUpdate],
    ) -> None:
        """Insert or update preference rows keyed by (user, tenant, type).

        Fields left as None keep their stored value; new rows take the
        system defaults for them.
        """
        try:
            with self._session_factory.begin() as session:
                for update_ in updates:
                    values = update_.model_dump(
                        exclude_none=True, exclude={"notification_type_id"}
                    )
                    if "priority_level" in values:
                        values["priority_level"] = update_.priority_level.value

                    row = session.get(
                        NotificationPreferenceRow,
                        (user_id, tenant_id, update_.notification_type_id),
                    )
                    if row is None:
                        session.add(
                            NotificationPreferenceRow(
                                user_id=user_id,
                                tenant_id=tenant_id,
                                notification_type_id=update_.notification_type_id,
                                **values,
                            )
                        )
                    else:
                        for field, value in values.items():
                            setattr(row, field, value)
        except SQLAlchemyError as e:
            raise self._fail("update_preferences", e) from e

    # Notifications

    def create(self, draft: NotificationDraft) -> str:
        """Insert a draft notification as unread with an empty channel status."""
        row = NotificationRow(
            tenant_id=draft.tenant_id,
            user_id=draft.user_id,
            title=draft.title,
            message=draft.message,
            notification_type_id=draft.notification_type_id,
            priority=draft.priority.value,
            status=NotificationStatus.UNREAD.value,
            channels=[channel.value for channel in draft.channels],
            channel_status={},
            related_entity_type=draft.related_entity.type if draft.related_entity else None,
            related_entity_id=draft.related_entity.id if draft.related_entity else None,
            action_url=draft.action.url if draft.action else None,
            action_text=draft.action.text if draft.action else None,
            action_data=draft.action.data if draft.action else None,
            expires_at=draft.expires_at,
        )
        if draft.created_at is not None:
            row.created_at = draft.created_at

        try:
            with self._session_factory.begin() as session:
                session.add(row)
                session.flush()
                notification_id = row.id
        except SQLAlchemyError as e:
            raise self._fail("create_notification", e) from e

        logger.debug(
            "notification_row_inserted",
            notification_id=notification_id,
            channels=row.channels,
        )
        return notification_id

    def update_channel_status(
        self,
        notification_id: str,
        channel_status: dict[ChannelName, ChannelOutcome],
        sent_at: Optional[datetime] = None,
    ) -> None:
        """Merge channel outcomes into the stored map and stamp sent_at.

        Raises:
            NotFoundError: No notification with this id
            PersistenceError: The update failed
        """
        try:
            with self._session_factory.begin() as session:
                row = session.get(NotificationRow, notification_id)
                if row is None:
                    raise NotFoundError("notification", notification_id)
                merged = dict(row.channel_status or {})
                merged.update(
                    {
                        ChannelName(channel).value: ChannelOutcome(outcome).value
                        for channel, outcome in channel_status.items()
                    }
                )
                row.channel_status = merged
                row.sent_at = sent_at or datetime.now(timezone.utc)
        except SQLAlchemyError as e:
            raise self._fail("update_channel_status", e) from e

    def get(self, notification_id: str) -> Optional[NotificationRecord]:
        try:
            with self._session_factory() as session:
                row = session.get(NotificationRow, notification_id)
                return _to_record(row) if row else None
        except SQLAlchemyError as e:
            raise self._fail("get_notification", e) from e

    def list_for_user(
        self,
        user_id: str,
        tenant_id: str,
        query: Optional[NotificationQuery] = None,
    ) -> Tuple[List[NotificationRecord], int]:
        """Newest-first page of a user's notifications plus the filtered total."""
        query = query or NotificationQuery()

        filtered = select(NotificationRow.id).where(
            NotificationRow.user_id == user_id,
            NotificationRow.tenant_id == tenant_id,
        )
        if query.status != "all":
            filtered = filtered.where(NotificationRow.status == query.status)
        if query.type:
            filtered = filtered.join(
                NotificationTypeRow,
                NotificationTypeRow.id == NotificationRow.notification_type_id,
            ).where(NotificationTypeRow.type_name == query.type)

        ids = filtered.subquery()
        count_stmt = select(func.count()).select_from(ids)
        page_stmt = (
            select(NotificationRow)
            .where(NotificationRow.id.in_(select(ids.c.id)))
            .order_by(NotificationRow.created_at.desc(), NotificationRow.id.desc())
            .limit(query.limit)
            .offset(query.offset)
        )

        try:
            with self._session_factory() as session:
                total = session.scalar(count_stmt) or 0
                rows = session.scalars(page_stmt).all()
                return [_to_record(row) for row in rows], total
        except SQLAlchemyError as e:
            raise self._fail("list_notifications", e) from e

    def count_unread(self, user_id: str, tenant_id: str) -> int:
        stmt = select(func.count(NotificationRow.id)).where(
            NotificationRow.user_id == user_id,
            NotificationRow.tenant_id == tenant_id,
            NotificationRow.status == NotificationStatus.UNREAD.value,
        )
        try:
            with self._session_factory() as session:
                return session.scalar(stmt) or 0
        except SQLAlchemyError as e:
            raise self._fail("count_unread", e) from e

    def mark_read(
        self,
        user_id: str,
        tenant_id: str,
        notification_ids: Optional[Iterable[str]] = None,
    ) -> int:
        """Mark unread notifications read; all of the user's when ids is None.

        Returns:
            Number of notifications that changed state
        """
        stmt = (
            update(NotificationRow)
            .where(
                NotificationRow.user_id == user_id,
                NotificationRow.tenant_id == tenant_id,
                NotificationRow.status == NotificationStatus.UNREAD.value,
            )
            .values(
                status=NotificationStatus.READ.value,
                read_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if notification_ids is not None:
            ids = list(notification_ids)
            if not ids:
                return 0
            stmt = stmt.where(NotificationRow.id.in_(ids))

        try:
            with self._session_factory.begin() as session:
                return session.execute(stmt).rowcount or 0
        except SQLAlchemyError as e:
            raise self._fail("mark_read", e) from e

    def archive(
        self, user_id: str, tenant_id: str, notification_ids: Iterable[str]
    ) -> int:
        """Archive notifications (terminal state).

        Returns:
            Number of notifications that changed state
        """
        ids = list(notification_ids)
        if not ids:
            return 0

        stmt = (
            update(NotificationRow)
            .where(
                NotificationRow.user_id == user_id,
                NotificationRow.tenant_id == tenant_id,
                NotificationRow.status != NotificationStatus.ARCHIVED.value,
                NotificationRow.id.in_(ids),
            )
            .values(
                status=NotificationStatus.ARCHIVED.value,
                archived_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            with self._session_factory.begin() as session:
                return session.execute(stmt).rowcount or 0
        except SQLAlchemyError as e:
            raise self._fail("archive", e) from e

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Delete notifications whose expires_at has passed."""
        cutoff = now or datetime.now(timezone.utc)
        stmt = (
            delete(NotificationRow)
            .where(
                NotificationRow.expires_at.is_not(None),
                NotificationRow.expires_at < cutoff,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            with self._session_factory.begin() as session:
                return session.execute(stmt).rowcount or 0
        except SQLAlchemyError as e:
            raise self._fail("cleanup_expired", e) from e

    # Seeding (migrations, fixtures)

    def add_notification_type(
        self,
        type_name: str,
        display_name: str,
        is_active: bool = True,
        description: Optional[str] = None,
    ) -> NotificationType:
        row = NotificationTypeRow(
            type_name=type_name,
            display_name=display_name,
            is_active=is_active,
            description=description,
        )
        try:
            with self._session_factory.begin() as session:
                session.add(row)
                session.flush()
                return _to_type(row)
        except SQLAlchemyError as e:
            raise self._fail("add_notification_type", e) from e

    def add_template(
        self,
        notification_type_id: str,
        subject_template: str,
        message_template: str,
        tenant_id: Optional[str] = None,
        is_active: bool = True,
    ) -> NotificationTemplate:
        row = NotificationTemplateRow(
            tenant_id=tenant_id,
            notification_type_id=notification_type_id,
            subject_template=subject_template,
            message_template=message_template,
            is_active=is_active,
        )
        try:
            with self._session_factory.begin() as session:
                session.add(row)
                session.flush()
                return _to_template(row)
        except SQLAlchemyError as e:
            raise self._fail("add_template", e) from e
