"""Channel preference resolution.

Precedence for the channels of a send:
1. The channel set given explicitly on the request (replaces preferences)
2. The user's stored preference for the notification type
3. ChannelSet.system_default()
"""

from typing import List, Optional, Sequence

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import (
    ChannelSet,
    NotificationPreference,
    PreferenceUpdate,
)
from infrastructure.notifications.store import NotificationRecordStore

logger = get_module_logger()


class PreferenceResolver:
    """Resolves and maintains per-user channel preferences."""

    def __init__(self, store: NotificationRecordStore):
        self._store = store

    def resolve_channels(
        self,
        user_id: str,
        tenant_id: str,
        notification_type_id: str,
        requested: Optional[ChannelSet] = None,
    ) -> ChannelSet:
        """Return the effective channel set for one recipient.

        Args:
            user_id: Recipient
            tenant_id: Tenant of the recipient
            notification_type_id: Resolved notification type
            requested: Explicit channel set from the request, if any

        Returns:
            ChannelSet to dispatch on
        """
        if requested is not None:
            return requested

        preference = self._store.find_preference(
            user_id, tenant_id, notification_type_id
        )
        if preference is not None:
            return preference.to_channel_set()

        logger.debug(
            "using_default_channels",
            user_id=user_id,
            tenant_id=tenant_id,
            notification_type_id=notification_type_id,
        )
        return ChannelSet.system_default()

    def get_user_preferences(
        self,
        user_id: str,
        tenant_id: str,
        notification_type_id: Optional[str] = None,
    ) -> List[NotificationPreference]:
        return self._store.list_preferences(user_id, tenant_id, notification_type_id)

    def update_preferences(
        self,
        user_id: str,
        tenant_id: str,
        updates: Sequence[PreferenceUpdate],
    ) -> None:
        if not updates:
            return
        self._store.upsert_preferences(user_id, tenant_id, updates)
        logger.info(
            "preferences_updated",
            user_id=user_id,
            tenant_id=tenant_id,
            count=len(updates),
        )
