"""Application startup and shutdown.

Startup configures logging, ensures the notification tables exist, builds
the notification service and starts the scheduled jobs (expired
notification cleanup, channel health). Shutdown stops the jobs and the
dispatch worker pools.
"""

import sys
import threading
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, List, Optional

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.persistence import create_schema
from infrastructure.services import (
    get_engine,
    get_notification_service,
    get_settings,
)
from jobs import scheduled_tasks

if TYPE_CHECKING:
    from infrastructure.configuration import Settings
    from infrastructure.notifications.service import NotificationService


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _log_configuration(settings: "Settings", logger: BoundLogger) -> None:
    # Section values may hold provider API keys; only their names are logged.
    sections: Dict[str, List[str]] = {}
    base_settings = {}
    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            sections[key] = sorted(value)
        else:
            base_settings[key] = value

    logger.info("configuration_initialized", base_settings=base_settings)
    for section, keys in sections.items():
        logger.info("configuration_loaded", config_setting=section, keys=keys)

    configured = [
        channel
        for channel in ("email", "sms", "push", "whatsapp")
        if settings.channels.provider_for(channel)[0]
    ]
    logger.info("channel_providers_configured", channels=configured)


def _start_scheduled_tasks(
    service: "NotificationService",
    settings: "Settings",
    logger: BoundLogger,
) -> Optional[threading.Event]:
    if _is_test_environment():
        logger.info("scheduled_tasks_skipped", reason="test_environment")
        return None

    scheduled_tasks.init(service, settings)
    stop_event = scheduled_tasks.run_continuously()
    logger.info("scheduled_tasks_started")
    return stop_event


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = configure_logging(settings=settings)
    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _log_configuration(settings, logger)

    create_schema(get_engine())
    service = get_notification_service()
    stop_event = _start_scheduled_tasks(service, settings, logger)

    yield

    logger.info("application_shutdown")
    if stop_event is not None:
        stop_event.set()
    service.shutdown()
