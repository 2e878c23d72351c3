"""Base classes of the settings sections.

Every section reads the process environment and ``.env`` with
case-sensitive names and ignores variables it does not declare, so
sections can share one ``.env`` file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """External delivery providers (one endpoint per external channel)."""

    model_config = SECTION_CONFIG


class FeatureSettings(BaseSettings):
    """Tuning of the dispatch engine (timeouts, worker pools, defaults)."""

    model_config = SECTION_CONFIG


class InfrastructureSettings(BaseSettings):
    """Database connection and HTTP server."""

    model_config = SECTION_CONFIG
