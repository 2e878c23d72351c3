"""Structlog configuration and logger factories.

Every module of the service logs through a structlog BoundLogger obtained
from ``get_module_logger()``. ``configure_logging()`` is called once by the
server lifespan; importing this module configures a default pipeline so
that modules imported earlier (or from scripts and tests) can log too.

Pipeline (outside tests):
    contextvars -> level -> timestamp -> call site -> app info
        -> secret masking -> truncation -> exc info -> renderer

Production (empty PREFIX) renders one JSON object per line; other
environments use the structlog console renderer.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging(settings=settings)

    logger = get_module_logger()
    logger.info("notification_created", notification_id=notification_id)
"""

import inspect
import logging
import sys
from types import ModuleType
from typing import TYPE_CHECKING, Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

APP_NAME = "notification-dispatch"
SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _configure_silent() -> BoundLogger:
    # pytest captures nothing useful from structlog; drop every record.
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=SILENT_LEVEL, force=True)
    logging.root.setLevel(SILENT_LEVEL)
    return structlog.stdlib.get_logger()


def build_processors(app_version: str, json_output: bool) -> List[Any]:
    """Processor chain shared by every logger of the service.

    Args:
        app_version: Deployed version stamped on each entry (GIT_SHA)
        json_output: Render JSON lines instead of console output
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    return [
        # correlation_id, user_id and tenant_id bound by bind_request_context
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        add_app_info(APP_NAME, app_version),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
    settings: Optional["Settings"] = None,
) -> BoundLogger:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: Overrides settings.LOG_LEVEL.
        is_production: Overrides settings.is_production (JSON vs console).
        settings: Settings instance; loaded from the environment when omitted.

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        return _configure_silent()

    if settings is None:
        # Imported lazily: configuration modules log through this package.
        from infrastructure.configuration import Settings

        settings = Settings()

    json_output = settings.is_production if is_production is None else is_production
    structlog.configure(
        processors=build_processors(settings.GIT_SHA, json_output),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level_name = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def _calling_module(depth: int = 2) -> Optional[ModuleType]:
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame is None:
            return None
        frame = frame.f_back
    if frame is None:
        return None
    return inspect.getmodule(frame)


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Logger bound to ``name``, or to the calling module's name."""
    if name:
        return logger.bind(logger_name=name)
    module = _calling_module()
    return logger.bind(logger_name=module.__name__ if module else "unknown")


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Binds ``component`` (last dotted part) and ``module_path``:

        # in infrastructure/notifications/orchestrator.py
        logger = get_module_logger()
        # {"component": "orchestrator",
        #  "module_path": "infrastructure.notifications.orchestrator"}
    """
    module = _calling_module()
    if module is None:
        return logger.bind(component="unknown")
    return logger.bind(
        component=module.__name__.rsplit(".", 1)[-1],
        module_path=module.__name__,
    )
