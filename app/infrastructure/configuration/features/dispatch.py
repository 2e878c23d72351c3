"""Notification dispatch settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings

VALID_PRIORITIES = ("low", "medium", "high", "urgent")


class DispatchSettings(FeatureSettings):
    """Notification dispatch engine configuration.

    Environment Variables:
        DISPATCH_CHANNEL_TIMEOUT_SECONDS: Per-dispatch deadline for external
            channel sends (default: 10)
        DISPATCH_MAX_BULK_WORKERS: Thread pool size for bulk recipient fan-out (default: 8)
        DISPATCH_DEFAULT_PRIORITY: Priority used when a request omits one (default: medium)
        DISPATCH_CLEANUP_INTERVAL_MINUTES: Expired notification cleanup cadence (default: 60)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        timeout = settings.dispatch.DISPATCH_CHANNEL_TIMEOUT_SECONDS
        ```
    """

    DISPATCH_CHANNEL_TIMEOUT_SECONDS: float = Field(
        default=10.0, alias="DISPATCH_CHANNEL_TIMEOUT_SECONDS"
    )
    DISPATCH_MAX_BULK_WORKERS: int = Field(default=8, alias="DISPATCH_MAX_BULK_WORKERS")
    DISPATCH_DEFAULT_PRIORITY: str = Field(
        default="medium", alias="DISPATCH_DEFAULT_PRIORITY"
    )
    DISPATCH_CLEANUP_INTERVAL_MINUTES: int = Field(
        default=60, alias="DISPATCH_CLEANUP_INTERVAL_MINUTES"
    )

    @field_validator("DISPATCH_DEFAULT_PRIORITY")
    @classmethod
    def validate_default_priority(cls, v: str) -> str:
        """Ensure the default priority is a known level."""
        if v not in VALID_PRIORITIES:
            raise ValueError(
                f"DISPATCH_DEFAULT_PRIORITY must be one of {VALID_PRIORITIES}: {v}"
            )
        return v
