"""Relational database settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DatabaseSettings(InfrastructureSettings):
    """Database connection configuration for the notification record store.

    Environment Variables:
        DATABASE_URL: SQLAlchemy database URL (default: sqlite:///./notifications.db)
        DATABASE_ECHO: Echo SQL statements to the log (default: False)
        DATABASE_POOL_PRE_PING: Check connections before use (default: True)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        url = settings.database.DATABASE_URL
        ```
    """

    DATABASE_URL: str = Field(
        default="sqlite:///./notifications.db", alias="DATABASE_URL"
    )
    DATABASE_ECHO: bool = Field(default=False, alias="DATABASE_ECHO")
    DATABASE_POOL_PRE_PING: bool = Field(default=True, alias="DATABASE_POOL_PRE_PING")
