"""Notification channel abstract base class.

All channel implementations (in-app, HTTP provider) implement this interface.
"""

from abc import ABC, abstractmethod

from infrastructure.notifications.models import ChannelDelivery, ChannelName, ChannelResult
from infrastructure.operations import OperationResult


class NotificationChannel(ABC):
    """Abstract base class for delivery channels.

    A channel makes exactly one delivery attempt per ``send`` call and
    reports the outcome as a ChannelResult. Implementations should return a
    FAILED result rather than raise; the dispatcher still contains anything
    that escapes.

    Example Implementation:
        class PagerChannel(NotificationChannel):

            @property
            def channel_name(self) -> ChannelName:
                return ChannelName.SMS

            def send(self, delivery: ChannelDelivery) -> ChannelResult:
                page(delivery.user_id, delivery.message)
                return self.sent("Paged user")

            def health_check(self) -> OperationResult:
                return OperationResult.success(message="pager reachable")
    """

    @property
    @abstractmethod
    def channel_name(self) -> ChannelName:
        """Channel this adapter delivers on."""
        pass

    @abstractmethod
    def send(self, delivery: ChannelDelivery) -> ChannelResult:
        """Deliver one notification to one user.

        Args:
            delivery: Rendered content plus recipient and notification ids

        Returns:
            ChannelResult with SENT or FAILED outcome
        """
        pass

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Check channel health (provider reachable, credentials present)."""
        pass

    def sent(self, message: str, external_id=None) -> ChannelResult:
        return ChannelResult.sent(self.channel_name, message, external_id=external_id)

    def failed(self, message: str, error_code=None) -> ChannelResult:
        return ChannelResult.failed(self.channel_name, message, error_code=error_code)
