"""Exception handlers mapping dispatch engine errors to HTTP responses."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import (
    NotFoundError,
    NotificationError,
    PersistenceError,
    ValidationError,
)

logger = get_module_logger()

STATUS_BY_ERROR_CODE = {
    NotFoundError.error_code: 404,
    ValidationError.error_code: 422,
    PersistenceError.error_code: 503,
}


def status_for(error_code: Optional[str]) -> int:
    return STATUS_BY_ERROR_CODE.get(error_code or "", 400)


async def notification_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, NotificationError):
        raise exc
    status_code = status_for(exc.error_code)
    if status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            error=str(exc),
            error_code=exc.error_code,
        )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "errorCode": exc.error_code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotificationError, notification_error_handler)
