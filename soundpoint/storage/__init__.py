"""Balance and sound-reference storage collaborators."""

from .base import AudioCatalog, PointStore, normalize_user  # noqa: F401
from .catalog import SettingsAudioCatalog  # noqa: F401
from .json_store import JsonPointStore  # noqa: F401
from .memory import InMemoryPointStore  # noqa: F401

__all__ = [
    "AudioCatalog",
    "InMemoryPointStore",
    "JsonPointStore",
    "PointStore",
    "SettingsAudioCatalog",
    "normalize_user",
]
