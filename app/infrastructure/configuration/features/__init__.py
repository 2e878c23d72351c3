"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.dispatch import DispatchSettings

__all__ = ["DispatchSettings"]
