"""In-app channel.

In-app delivery means the notification row exists; there is no external
call, so an enabled in-app channel is always reported as sent.
"""

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import ChannelDelivery, ChannelName, ChannelResult
from infrastructure.operations import OperationResult


class InAppChannel(NotificationChannel):
    """Channel backed by the notification record itself."""

    @property
    def channel_name(self) -> ChannelName:
        return ChannelName.IN_APP

    def send(self, delivery: ChannelDelivery) -> ChannelResult:
        return self.sent(
            "Stored for in-app display", external_id=delivery.notification_id
        )

    def health_check(self) -> OperationResult:
        return OperationResult.success(message="In-app channel available")
