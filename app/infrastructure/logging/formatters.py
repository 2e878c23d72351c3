"""Structlog processors of the logging pipeline.

Notification payloads reach the logs as template variables, provider
responses and rendered bodies, so the pipeline stamps the app version,
redacts credential-like keys (nested dicts included) and bounds the length
of string values.
"""

from typing import Any, Callable, Dict, Optional

EventDict = Dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

# Key fragments whose values never reach the log output
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "private_key",
        "cookie",
        "jwt",
        "bearer",
    }
)


def add_app_info(app_name: str, app_version: str = "unknown") -> Processor:
    """Stamp ``app_name`` and ``app_version`` (the deployed git SHA) on each entry."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: Optional[frozenset] = None,
) -> Processor:
    """Redact values whose key contains a sensitive fragment.

    Matching is a case-insensitive substring test, so ``provider_api_key``
    and ``Authorization`` are both masked. Dict values (template variables,
    provider payloads) are walked recursively; None is left as is.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def is_sensitive(key: Any) -> bool:
        key_lower = str(key).lower()
        return any(pattern in key_lower for pattern in patterns)

    def mask(values: Dict[Any, Any]) -> Dict[Any, Any]:
        masked = {}
        for key, value in values.items():
            if value is not None and is_sensitive(key):
                masked[key] = mask_value
            elif isinstance(value, dict):
                masked[key] = mask(value)
            else:
                masked[key] = value
        return masked

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        return mask(event_dict)

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Cut top-level string values longer than ``max_length``.

    Rendered notification bodies are unbounded; this keeps one log line small.
    """

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
