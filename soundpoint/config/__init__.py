"""Configuration package: pydantic settings models and the JSON loader."""

from .loader import load_settings, parse_settings, settings_path  # noqa: F401
from .model import (  # noqa: F401
    AudioReference,
    AudioSettings,
    BotSettings,
    CommandSettings,
    ServerSettings,
    Settings,
    StorageSettings,
)

__all__ = [
    "AudioReference",
    "AudioSettings",
    "BotSettings",
    "CommandSettings",
    "ServerSettings",
    "Settings",
    "StorageSettings",
    "load_settings",
    "parse_settings",
    "settings_path",
]
