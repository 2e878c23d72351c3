"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.channels import ChannelProviderSettings

__all__ = ["ChannelProviderSettings"]
