"""Errors raised by the notification dispatch engine."""

from typing import Optional


class NotificationError(Exception):
    """Base class for dispatch engine errors."""

    error_code = "NOTIFICATION_ERROR"


class NotFoundError(NotificationError):
    """Raised when a notification type (or stored notification) does not exist.

    Attributes:
        resource: Kind of resource looked up (``notification_type``, ``notification``)
        key: Lookup key that missed
    """

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, key: str):
        super().__init__(f"{resource.replace('_', ' ').capitalize()} '{key}' not found")
        self.resource = resource
        self.key = key


class PersistenceError(NotificationError):
    """Raised when the record store cannot complete a read or write.

    Attributes:
        operation: Store operation that failed (``create``, ``update_channel_status``, ...)
    """

    error_code = "PERSISTENCE_ERROR"

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class ChannelDeliveryError(NotificationError):
    """A single channel failed to deliver.

    Adapters may raise it; the dispatcher records the channel as failed and
    never lets it escape a dispatch call.
    """

    error_code = "DELIVERY_FAILED"

    def __init__(self, channel: str, message: str, error_code: Optional[str] = None):
        super().__init__(f"{channel}: {message}")
        self.channel = channel
        self.error_code = error_code or self.error_code


class ValidationError(NotificationError):
    """Raised for malformed requests (blank recipient, invalid payload)."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
