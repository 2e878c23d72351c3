"""Test data factories for deterministic test data generation."""

from tests.factories.notifications import (
    make_channel_delivery,
    make_channel_result,
    make_channel_set,
    make_notification_request,
    make_preference_update,
)

__all__ = [
    "make_channel_delivery",
    "make_channel_result",
    "make_channel_set",
    "make_notification_request",
    "make_preference_update",
]
