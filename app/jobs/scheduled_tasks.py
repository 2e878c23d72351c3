import functools
import threading
import time
from typing import TYPE_CHECKING

import schedule

from infrastructure.logging import get_module_logger
from infrastructure.resilience import get_all_circuit_breaker_stats

if TYPE_CHECKING:
    from infrastructure.configuration import Settings
    from infrastructure.notifications.service import NotificationService

logger = get_module_logger()


def safe_run(job):
    """A failing job is logged and stays scheduled."""

    @functools.wraps(job)
    def wrapper(*args, **kwargs):
        try:
            job(*args, **kwargs)
        except Exception as e:  # pylint: disable=broad-except
            logger.error("scheduled_job_failed", job=job.__name__, error=str(e))

    return wrapper


def init(service: "NotificationService", settings: "Settings"):
    logger.info("scheduled_tasks_initialized")

    schedule.every(settings.dispatch.DISPATCH_CLEANUP_INTERVAL_MINUTES).minutes.do(
        safe_run(cleanup_expired_notifications), service=service
    )
    schedule.every(5).minutes.do(safe_run(scheduler_heartbeat))
    schedule.every(5).minutes.do(safe_run(channel_healthchecks), service=service)


def scheduler_heartbeat():
    logger.info("scheduler_heartbeat", at=time.ctime())


def cleanup_expired_notifications(service: "NotificationService"):
    deleted = service.cleanup_expired()
    logger.info("expired_notifications_cleanup_completed", deleted=deleted)


def channel_healthchecks(service: "NotificationService"):
    for channel, healthy in service.channel_health().items():
        if healthy:
            logger.info("channel_healthy", channel=channel.value)
        else:
            logger.warning("channel_unhealthy", channel=channel.value)

    for name, stats in get_all_circuit_breaker_stats().items():
        if stats["state"] != "closed":
            logger.warning(
                "circuit_not_closed",
                circuit=name,
                state=stats["state"],
                failure_count=stats["failure_count"],
            )


def run_continuously(interval=1):
    """Run pending jobs on a daemon thread until the returned event is set.

    Runs missed while a job was executing are not replayed.
    """
    stop_event = threading.Event()

    def _loop():
        while not stop_event.is_set():
            schedule.run_pending()
            stop_event.wait(interval)

    threading.Thread(target=_loop, name="scheduled-tasks", daemon=True).start()
    return stop_event
