"""All enums used by the Sonos Now Playing models."""

from __future__ import annotations

from enum import StrEnum
from typing import Self


class TrackSource(StrEnum):
    """Enum with the (classified) origin of the playing track."""

    STREAMING_SERVICE = "streaming_service"
    INTERNET_RADIO = "internet_radio"
    LOCAL_QUEUE = "local_queue"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls: Self, value: object) -> Self:  # noqa: ARG003
        """Set default enum member if an unknown value is provided."""
        return cls.UNKNOWN


class TransportState(StrEnum):
    """Enum for the (observed) transport state of a coordinator."""

    UNKNOWN = "unknown"
    STOPPED = "stopped"
    PAUSED = "paused"
    PLAYING = "playing"
    TRANSITIONING = "transitioning"

    @classmethod
    def _missing_(cls: Self, value: object) -> Self:  # noqa: ARG003
        """Set default enum member if an unknown value is provided."""
        return cls.UNKNOWN

    @classmethod
    def from_raw(cls, raw_state: str | None) -> TransportState:
        """Convert a raw device transport state into a TransportState."""
        if not raw_state:
            return cls.UNKNOWN
        raw_state = raw_state.lower()
        if raw_state == "paused_playback":
            return cls.PAUSED
        if raw_state == "no_media_present":
            return cls.STOPPED
        return cls(raw_state)


class TransportAction(StrEnum):
    """Enum with the transport commands that can be dispatched to a coordinator."""

    PLAY = "play"
    PAUSE = "pause"
    NEXT = "next"
    PREVIOUS = "previous"
    VOLUME = "volume"
