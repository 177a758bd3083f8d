"""Sonos Now Playing engine."""

from .server import SonosNowPlaying

__all__ = ["SonosNowPlaying"]
