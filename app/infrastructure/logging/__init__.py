"""Structured logging for the notification service (structlog).

Modules log through ``get_module_logger()``. The dispatch path wraps each
send in ``bind_request_context()`` so every entry emitted while a
notification is created and fanned out carries the correlation id, user
and tenant, including entries emitted on channel and bulk worker threads.

    from infrastructure.logging import bind_request_context, get_module_logger

    logger = get_module_logger()

    with bind_request_context(user_id="u-1", tenant_id="t-1"):
        logger.info("sending_notification")
"""

from infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
    set_correlation_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)
from infrastructure.logging.setup import (
    build_processors,
    configure_logging,
    get_logger,
    get_module_logger,
)

__all__ = [
    "configure_logging",
    "build_processors",
    "get_logger",
    "get_module_logger",
    "bind_request_context",
    "get_correlation_id",
    "set_correlation_id",
    "clear_request_context",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
