from __future__ import annotations

from collections.abc import Mapping

from ..config.model import AudioReference


class SettingsAudioCatalog:
    """Read-only sound lookup over the configured audio references."""

    def __init__(self, references: Mapping[str, AudioReference]) -> None:
        self._references = {k.strip().lower(): v for k, v in references.items()}

    def get_audio_reference(self, name: str) -> AudioReference | None:
        return self._references.get(name.strip().lower())
