from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import (
    PLAYBACK_DEFAULT_HOST,
    PLAYBACK_DEFAULT_PORT,
    TWITCH_IRC_ENDPOINT,
)


class BotSettings(BaseModel):
    """Identity the bot logs in with and the channel it joins at startup.

    Attributes:
        name: Bot account login; lower-cased on the wire.
        auth_token: OAuth chat token, with or without the ``oauth:`` prefix.
        channel: Channel to join once authenticated.
    """

    name: str = Field(min_length=1)
    auth_token: str = Field(min_length=1)
    channel: str

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        stripped = v.strip().lower()
        if not stripped:
            raise ValueError("bot name must not be empty")
        return stripped

    @field_validator("channel")
    @classmethod
    def normalize_channel(cls, v: str) -> str:
        stripped = v.strip().lstrip("#").lower()
        if not stripped:
            raise ValueError("Invalid channel name in settings")
        return stripped


class CommandSettings(BaseModel):
    prefix: str = "!"

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("Command prefix must consist of ONE character")
        return v


class AudioReference(BaseModel):
    """A purchasable sound.

    Attributes:
        price: Points charged per play.
        cooldown: Seconds before the same sound can be bought again.
        file_name: File handed to the playback renderer.
    """

    model_config = {"frozen": True}

    price: int = Field(ge=0)
    cooldown: int = Field(default=0, ge=0)
    file_name: str = Field(min_length=1)


class AudioSettings(BaseModel):
    references: dict[str, AudioReference] = Field(default_factory=dict)

    @field_validator("references", mode="before")
    @classmethod
    def lowercase_names(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        normalized: dict[str, Any] = {}
        for name, ref in v.items():
            key = str(name).strip().lower()
            if not key:
                raise ValueError("audio reference name must not be empty")
            if key in normalized:
                raise ValueError(f"duplicate audio reference name: {key}")
            normalized[key] = ref
        return normalized


class ServerSettings(BaseModel):
    endpoint: str = TWITCH_IRC_ENDPOINT
    playback_enabled: bool = True
    playback_host: str = PLAYBACK_DEFAULT_HOST
    playback_port: int = Field(default=PLAYBACK_DEFAULT_PORT, ge=0, le=65535)


class StorageSettings(BaseModel):
    path: str = "points.json"


class Settings(BaseModel):
    bot: BotSettings
    command: CommandSettings = Field(default_factory=CommandSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    connect_attempts: int = Field(default=1, ge=1)
