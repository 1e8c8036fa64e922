"""Twitch chat bot that lets viewers spend points on sound playback."""

__version__ = "0.1.0"
