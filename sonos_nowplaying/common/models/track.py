"""Model(s) for (now playing) Track metadata."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from mashumaro import DataClassDictMixin

from .enums import TrackSource, TransportState

FILLABLE_FIELDS = ("title", "artist", "album", "artwork")


@dataclass
class TrackMetadata(DataClassDictMixin):
    """Display metadata parsed from a single metadata source."""

    title: str = ""
    artist: str = ""
    album: str = ""
    artwork: str | None = None

    def __bool__(self) -> bool:
        """Return if any of the fields carries data."""
        return any(getattr(self, x.name) for x in fields(self))


@dataclass
class Track(DataClassDictMixin):
    """Normalized now playing track, filled incrementally by the metadata pipeline."""

    title: str = ""
    artist: str = ""
    album: str = ""
    source: TrackSource = TrackSource.UNKNOWN
    uri: str = ""
    artwork: str | None = None

    def fill(self, metadata: TrackMetadata | dict[str, Any]) -> None:
        """Fill the fields that are still empty, never overwrite existing data."""
        if isinstance(metadata, TrackMetadata):
            metadata = metadata.to_dict()
        for key in FILLABLE_FIELDS:
            if not getattr(self, key) and (value := metadata.get(key)):
                setattr(self, key, value)


@dataclass
class PlaybackState(DataClassDictMixin):
    """Raw playback state collected from a coordinator."""

    transport_state: TransportState = TransportState.UNKNOWN
    position_info: dict[str, str] = field(default_factory=dict)
    media_info: dict[str, str] = field(default_factory=dict)
