"""Notification channel implementations."""

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.in_app import InAppChannel
from infrastructure.notifications.channels.provider import HttpProviderChannel

__all__ = [
    "NotificationChannel",
    "InAppChannel",
    "HttpProviderChannel",
]
