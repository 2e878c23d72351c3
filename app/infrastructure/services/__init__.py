"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    NotificationServiceDep,
    SettingsDep,
)
from infrastructure.services.providers import (
    get_engine,
    get_notification_service,
    get_record_store,
    get_session_factory,
    get_settings,
)

__all__ = [
    "SettingsDep",
    "NotificationServiceDep",
    "get_settings",
    "get_engine",
    "get_session_factory",
    "get_record_store",
    "get_notification_service",
]
