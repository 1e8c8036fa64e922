"""Playback collaborators (renderer notification)."""

from .broadcaster import (  # noqa: F401
    DEPLOYMENT_ROUTE,
    DeploymentBroadcaster,
    NullPlayback,
    Playback,
)

__all__ = ["DEPLOYMENT_ROUTE", "DeploymentBroadcaster", "NullPlayback", "Playback"]
