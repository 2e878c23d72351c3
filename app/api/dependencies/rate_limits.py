"""Request rate limiting (slowapi).

Send endpoints are limited per tenant, so one noisy tenant cannot starve
the channel worker pools for the others. Requests without an
``X-Tenant-Id`` header (health checks, version) fall back to the client
address.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address


def tenant_or_remote_address(request: Request) -> str:
    tenant_id = request.headers.get("X-Tenant-Id", "").strip()
    if tenant_id:
        return f"tenant:{tenant_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=tenant_or_remote_address)


async def rate_limit_handler(_request: Request, exc: Exception) -> JSONResponse:
    """429 with a camelCase error body matching the other API errors."""
    detail = str(exc.detail) if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {detail}", "errorCode": "RATE_LIMITED"},
    )


def setup_rate_limiter(app: FastAPI) -> None:
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter() -> Limiter:
    return limiter
