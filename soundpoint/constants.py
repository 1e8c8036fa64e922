"""
Configuration constants for the Sound Point Bot

This module contains the tunable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Same contract as ``_get_env_int`` for floating point values.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Twitch chat endpoints
TWITCH_IRC_ENDPOINT = os.getenv(
    "TWITCH_IRC_ENDPOINT", "irc://irc.chat.twitch.tv:6667"
)  # Plain TCP IRC
TWITCH_IRC_WS_ENDPOINT = os.getenv(
    "TWITCH_IRC_WS_ENDPOINT", "ws://irc-ws.chat.twitch.tv:80"
)  # IRC over WebSocket
TWITCH_SERVER_SUFFIX = "tmi.twitch.tv"  # Host suffix on every user prefix

# Capabilities requested right after authentication
CAP_COMMANDS = "twitch.tv/commands"
CAP_TAGS = "twitch.tv/tags"
CAP_MEMBERSHIP = "twitch.tv/membership"

# Keep-alive probe sent by the server and the reply it expects
KEEPALIVE_PING = f"PING :{TWITCH_SERVER_SUFFIX}"
KEEPALIVE_PONG = f"PONG :{TWITCH_SERVER_SUFFIX}"

# Connection timeouts
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 15.0
)  # Seconds allowed for opening the socket
IRC_CLOSE_TIMEOUT = _get_env_float(
    "IRC_CLOSE_TIMEOUT", 5.0
)  # Seconds allowed for a graceful socket close
IRC_READ_LIMIT = _get_env_int(
    "IRC_READ_LIMIT", 64 * 1024
)  # Max bytes buffered for a single inbound line

# Caller-side connect retry policy
CONNECT_RETRY_MAX_BACKOFF_SECONDS = _get_env_int(
    "CONNECT_RETRY_MAX_BACKOFF_SECONDS", 30
)  # Upper bound on the wait between connect attempts

# Points storage
POINTS_LOCK_TTL_SECONDS = _get_env_int(
    "POINTS_LOCK_TTL_SECONDS", 3600
)  # Idle per-user locks older than this are pruned

# Playback broadcast server
PLAYBACK_DEFAULT_HOST = os.getenv("PLAYBACK_DEFAULT_HOST", "127.0.0.1")
PLAYBACK_DEFAULT_PORT = _get_env_int("PLAYBACK_DEFAULT_PORT", 8080)
PLAYBACK_SEND_TIMEOUT = _get_env_float(
    "PLAYBACK_SEND_TIMEOUT", 5.0
)  # Seconds allowed per client when broadcasting
