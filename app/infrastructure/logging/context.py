"""Request-scoped logging context.

``bind_request_context`` binds the correlation id, user and tenant of a
notification request to structlog's contextvars. The orchestrator copies
the context into each bulk worker, so per-recipient entries keep the
request's correlation id.

    with bind_request_context(user_id="u-1", tenant_id="t-1"):
        logger.info("processing_request")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind request metadata to every log entry emitted inside the block.

    A missing correlation id is inherited from an enclosing context, or
    generated. Values shadowed by a nested block are restored on exit.

    Example:
        with bind_request_context(
            correlation_id=request.headers.get("X-Correlation-ID"),
            user_id=user_id,
            tenant_id=tenant_id,
            notification_type="order_created",
        ):
            orchestrator.send(user_id, tenant_id, request)
    """
    context: dict[str, Any] = {
        "correlation_id": correlation_id or get_correlation_id() or str(uuid.uuid4()),
    }
    if user_id is not None:
        context["user_id"] = user_id
    if tenant_id is not None:
        context["tenant_id"] = tenant_id
    context.update(extra_context)

    outer = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context)
        shadowed = {key: outer[key] for key in context if key in outer}
        if shadowed:
            structlog.contextvars.bind_contextvars(**shadowed)


def get_correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get("correlation_id")


def set_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
