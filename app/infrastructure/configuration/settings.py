"""Top-level settings object of the notification service."""

from typing import ClassVar, Dict, Type

from pydantic_settings import BaseSettings

from infrastructure.configuration.base import SECTION_CONFIG
from infrastructure.configuration.features import DispatchSettings
from infrastructure.configuration.infrastructure import (
    DatabaseSettings,
    ServerSettings,
)
from infrastructure.configuration.integrations import ChannelProviderSettings


class Settings(BaseSettings):
    """Application settings with one nested section per concern.

    Sections not passed to the constructor are loaded from the environment,
    so tests can replace a single section:

        settings = Settings(database=DatabaseSettings(DATABASE_URL="sqlite://"))

    Environment Variables:
        PREFIX: Deployment prefix; empty in production
        LOG_LEVEL: Root log level
        GIT_SHA: Commit deployed, reported by /version
    """

    SECTIONS: ClassVar[Dict[str, Type[BaseSettings]]] = {
        "channels": ChannelProviderSettings,
        "dispatch": DispatchSettings,
        "database": DatabaseSettings,
        "server": ServerSettings,
    }

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    channels: ChannelProviderSettings
    dispatch: DispatchSettings
    database: DatabaseSettings
    server: ServerSettings

    model_config = SECTION_CONFIG

    def __init__(self, **kwargs):
        for name, section in self.SECTIONS.items():
            if name not in kwargs:
                kwargs[name] = section()
        super().__init__(**kwargs)

    @property
    def is_production(self) -> bool:
        return not self.PREFIX
