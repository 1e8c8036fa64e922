"""Settings file loading."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..logs.logger import logger
from .model import Settings

DEFAULT_SETTINGS_FILE = "settings.json"
SETTINGS_FILE_ENV = "SOUNDPOINT_CONF_FILE"


def settings_path() -> str:
    return os.environ.get(SETTINGS_FILE_ENV, DEFAULT_SETTINGS_FILE)


def parse_settings(data: Mapping[str, Any]) -> Settings:
    """Validate a raw settings mapping.

    Raises:
        ConfigurationError: If the mapping does not satisfy the schema.
    """
    try:
        return Settings.model_validate(dict(data))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(
            f"Invalid settings: {problems}", data={"errors": e.error_count()}
        ) from e


def load_settings(path: str | os.PathLike[str] | None = None) -> Settings:
    """Read and validate the JSON settings file.

    Args:
        path: Settings file; defaults to ``$SOUNDPOINT_CONF_FILE`` or
            ``settings.json``.

    Raises:
        ConfigurationError: Missing, unreadable or invalid settings.
    """
    config_path = Path(path or settings_path())
    try:
        with config_path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Settings file not found: {config_path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Settings file unreadable: {config_path}: {e}") from e
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Settings file must hold a JSON object: {config_path}")
    settings = parse_settings(raw)
    logger.log_event(
        "config",
        "loaded",
        path=str(config_path),
        sounds=len(settings.audio.references),
    )
    return settings
