"""Settings of the notification service.

Application code reads settings through ``infrastructure.services.get_settings``
(or the ``SettingsDep`` alias in routes). The section classes are exported
for tests that build a ``Settings`` with one section replaced.
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features import DispatchSettings
from infrastructure.configuration.infrastructure import (
    DatabaseSettings,
    ServerSettings,
)
from infrastructure.configuration.integrations import ChannelProviderSettings

__all__ = [
    "Settings",
    "DispatchSettings",
    "DatabaseSettings",
    "ServerSettings",
    "ChannelProviderSettings",
]
