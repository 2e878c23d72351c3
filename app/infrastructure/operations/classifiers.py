"""Error classifiers for delivery provider calls.

Converts ``requests`` exceptions raised while calling an external channel
provider into OperationResult objects, so channel adapters never raise.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = session.post(url, json=payload, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

from typing import Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

DEFAULT_RETRY_AFTER_SECONDS = 60


def _retry_after(response: Optional[requests.Response]) -> int:
    if response is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    header_value = response.headers.get("Retry-After")
    if not header_value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return int(header_value)
    except (ValueError, TypeError):
        return DEFAULT_RETRY_AFTER_SECONDS


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify a provider HTTP error into an OperationResult.

    Status Code Mapping:
    - 429: Rate limiting -> TRANSIENT_ERROR with retry_after
    - 401: Unauthorized -> UNAUTHORIZED
    - 403: Forbidden -> PERMANENT_ERROR
    - 404: Not found -> NOT_FOUND
    - 5xx: Server error -> TRANSIENT_ERROR
    - Other 4xx: -> PERMANENT_ERROR
    - Timeouts and connection errors -> TRANSIENT_ERROR

    Args:
        exc: Exception raised while calling the provider

    Returns:
        OperationResult with status, message, error_code and retry_after
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"Provider request timed out: {exc}",
            error_code="TIMEOUT",
        )

    if isinstance(exc, requests.ConnectionError):
        return OperationResult.transient_error(
            f"Connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    if not isinstance(exc, requests.HTTPError):
        return OperationResult.transient_error(
            f"Provider error: {type(exc).__name__}: {exc}",
            error_code="PROVIDER_ERROR",
        )

    response = exc.response
    status_code: Optional[int] = response.status_code if response is not None else None

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "Provider rate limited",
            error_code="RATE_LIMITED",
            retry_after=_retry_after(response),
        )

    if status_code == 401:
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            "Provider authentication failed",
            error_code="UNAUTHORIZED",
        )

    if status_code == 403:
        return OperationResult.permanent_error(
            "Provider authorization denied",
            error_code="FORBIDDEN",
        )

    if status_code == 404:
        return OperationResult.not_found("Provider endpoint not found")

    if status_code and 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"Provider server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    if status_code and 400 <= status_code < 500:
        return OperationResult.permanent_error(
            f"Provider client error ({status_code}): {exc}",
            error_code="HTTP_ERROR",
        )

    return OperationResult.permanent_error(
        f"Provider error: {exc}",
        error_code="UNKNOWN_ERROR",
    )
