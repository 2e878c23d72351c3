"""Channel dispatcher with parallel per-channel fan-out.

Delivers one stored notification on every enabled channel:
- In-app is recorded as sent without any external call
- Every other enabled channel gets exactly one attempt on its own thread,
  started as soon as the dispatch begins
- A failing, raising or hanging channel never affects another channel
- Disabled channels are left out of the result entirely

Usage Example:
    dispatcher = ChannelDispatcher(
        channels={ChannelName.EMAIL: email_channel},
        channel_timeout_seconds=10,
    )

    results = dispatcher.dispatch(
        notification_id,
        ChannelSet(in_app=True, email=True),
        RenderedContent(title="Order shipped", message="Order A-1 shipped"),
        user_id="u-1",
        tenant_id="t-1",
    )
    # {ChannelName.IN_APP: ChannelResult(outcome=SENT), ChannelName.EMAIL: ...}
"""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import JsonValue

from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.in_app import InAppChannel
from infrastructure.notifications.errors import ChannelDeliveryError
from infrastructure.notifications.models import (
    ChannelDelivery,
    ChannelName,
    ChannelOutcome,
    ChannelResult,
    ChannelSet,
    NotificationPriority,
    RenderedContent,
)

logger = get_module_logger()


def to_channel_status(
    results: Mapping[ChannelName, ChannelResult],
) -> Dict[ChannelName, ChannelOutcome]:
    """Collapse channel results into the persisted sent/failed map."""
    return {channel: result.outcome for channel, result in results.items()}


class ChannelDispatcher:
    """Parallel, failure-isolated delivery across channels.

    Attributes:
        channels: External channel adapters keyed by channel name
        channel_timeout_seconds: Deadline for all external channels of one dispatch

    Each dispatch gets a pool sized to its external channels, so a provider
    that hangs past the deadline keeps only its own thread busy and never
    delays the channels of later dispatches.
    """

    def __init__(
        self,
        channels: Mapping[ChannelName, NotificationChannel],
        channel_timeout_seconds: float = 10.0,
    ):
        if ChannelName.IN_APP in channels:
            raise ValueError("In-app delivery is built in and cannot be replaced")

        self.channels: Dict[ChannelName, NotificationChannel] = dict(channels)
        self.channel_timeout_seconds = channel_timeout_seconds
        self._in_app = InAppChannel()

        logger.info(
            "initialized_channel_dispatcher",
            channels=[channel.value for channel in self.channels],
            channel_timeout_seconds=channel_timeout_seconds,
        )

    def register_channel(self, channel: NotificationChannel) -> None:
        if channel.channel_name == ChannelName.IN_APP:
            raise ValueError("In-app delivery is built in and cannot be replaced")
        self.channels[channel.channel_name] = channel

    def dispatch(
        self,
        notification_id: str,
        channel_set: ChannelSet,
        content: RenderedContent,
        variables: Optional[Mapping[str, JsonValue]] = None,
        *,
        user_id: str,
        tenant_id: str,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
    ) -> Dict[ChannelName, ChannelResult]:
        """Attempt delivery on every enabled channel exactly once.

        Never raises for channel-level problems: exceptions, adapter-reported
        failures, unregistered channels and timeouts all become FAILED
        results for that channel only. Channels still running when the
        deadline passes are left to finish in the background; their late
        outcome is discarded.

        Returns:
            Result per enabled channel, in canonical channel order
        """
        enabled = channel_set.enabled()
        results: Dict[ChannelName, ChannelResult] = {}
        sends: List[Tuple[ChannelName, NotificationChannel, ChannelDelivery]] = []

        for channel_name in enabled:
            delivery = ChannelDelivery(
                notification_id=notification_id,
                user_id=user_id,
                tenant_id=tenant_id,
                channel=channel_name,
                title=content.title,
                message=content.message,
                priority=priority,
                variables=dict(variables or {}),
            )

            if channel_name == ChannelName.IN_APP:
                results[channel_name] = self._in_app.send(delivery)
                continue

            channel = self.channels.get(channel_name)
            if channel is None:
                logger.warning(
                    "channel_not_registered",
                    channel=channel_name.value,
                    notification_id=notification_id,
                )
                results[channel_name] = ChannelResult.failed(
                    channel_name,
                    f"No adapter registered for {channel_name.value}",
                    error_code="CHANNEL_NOT_REGISTERED",
                )
                continue

            sends.append((channel_name, channel, delivery))

        if sends:
            executor = ThreadPoolExecutor(
                max_workers=len(sends), thread_name_prefix="channel-dispatch"
            )
            pending: Dict[Future, ChannelName] = {
                executor.submit(channel.send, delivery): channel_name
                for channel_name, channel, delivery in sends
            }
            # Every send starts at once, so the deadline never covers queue time.
            done, not_done = wait(pending, timeout=self.channel_timeout_seconds)
            executor.shutdown(wait=False)

            for future in done:
                channel_name = pending[future]
                results[channel_name] = self._collect(
                    future, channel_name, notification_id
                )

            for future in not_done:
                channel_name = pending[future]
                logger.error(
                    "channel_send_timed_out",
                    channel=channel_name.value,
                    notification_id=notification_id,
                    timeout_seconds=self.channel_timeout_seconds,
                )
                results[channel_name] = ChannelResult.failed(
                    channel_name,
                    f"No response within {self.channel_timeout_seconds}s",
                    error_code="TIMEOUT",
                )

        ordered = {channel: results[channel] for channel in enabled}
        logger.info(
            "notification_dispatched",
            notification_id=notification_id,
            channels=[channel.value for channel in enabled],
            sent_count=sum(1 for r in ordered.values() if r.is_success),
            failed_count=sum(1 for r in ordered.values() if not r.is_success),
        )
        return ordered

    def _collect(
        self, future: Future, channel_name: ChannelName, notification_id: str
    ) -> ChannelResult:
        try:
            result = future.result()
        except ChannelDeliveryError as e:
            logger.error(
                "channel_send_failed",
                channel=channel_name.value,
                notification_id=notification_id,
                error=str(e),
                error_code=e.error_code,
            )
            return ChannelResult.failed(
                channel_name, str(e), error_code=e.error_code or "DELIVERY_FAILED"
            )
        except Exception as e:
            logger.error(
                "channel_exception",
                channel=channel_name.value,
                notification_id=notification_id,
                error=str(e),
                exc_info=True,
            )
            return ChannelResult.failed(
                channel_name,
                f"Channel exception: {e}",
                error_code="CHANNEL_EXCEPTION",
            )

        if not isinstance(result, ChannelResult):
            return ChannelResult.failed(
                channel_name,
                f"Channel returned {type(result).__name__}, expected ChannelResult",
                error_code="INVALID_RESULT",
            )
        if result.channel != channel_name:
            result = result.model_copy(update={"channel": channel_name})
        return result

    def health_check(self) -> Dict[ChannelName, bool]:
        """Health of every channel; unregistered channels report False."""
        health: Dict[ChannelName, bool] = {}
        for channel_name in ChannelName:
            if channel_name == ChannelName.IN_APP:
                channel: Optional[NotificationChannel] = self._in_app
            else:
                channel = self.channels.get(channel_name)

            if channel is None:
                health[channel_name] = False
                continue
            try:
                health[channel_name] = channel.health_check().is_success
            except Exception as e:
                logger.error(
                    "channel_health_check_failed",
                    channel=channel_name.value,
                    error=str(e),
                    exc_info=True,
                )
                health[channel_name] = False
        return health
