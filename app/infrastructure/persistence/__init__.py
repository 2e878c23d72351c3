"""Relational persistence for the notification engine.

Provides the SQLAlchemy table mappings and engine/session helpers used by
the notification record store.
"""

from infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
    engine_from_settings,
)
from infrastructure.persistence.models import (
    Base,
    NotificationPreferenceRow,
    NotificationRow,
    NotificationTemplateRow,
    NotificationTypeRow,
)

__all__ = [
    "Base",
    "NotificationTypeRow",
    "NotificationTemplateRow",
    "NotificationPreferenceRow",
    "NotificationRow",
    "build_engine",
    "build_session_factory",
    "create_schema",
    "engine_from_settings",
]
