"""Notification type registry.

Resolves a type name from a send request to its catalog entry. Only active
types resolve; names match exactly (case-sensitive).
"""

from typing import List

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import NotFoundError
from infrastructure.notifications.models import NotificationType
from infrastructure.notifications.store import NotificationRecordStore

logger = get_module_logger()


class NotificationTypeRegistry:
    """Lookup of active notification types."""

    def __init__(self, store: NotificationRecordStore):
        self._store = store

    def resolve_type(self, type_name: str) -> NotificationType:
        """Return the active type named ``type_name``.

        Raises:
            NotFoundError: No active type has that exact name
        """
        notification_type = self._store.get_active_type(type_name)
        if notification_type is None:
            logger.warning("notification_type_not_found", type_name=type_name)
            raise NotFoundError("notification_type", type_name)
        return notification_type

    def list_types(self) -> List[NotificationType]:
        return self._store.list_active_types()
