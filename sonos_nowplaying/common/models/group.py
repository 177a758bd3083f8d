"""Model(s) for the group listing."""

from __future__ import annotations

from dataclasses import dataclass, field

from mashumaro import DataClassDictMixin

from .device import GroupMember
from .enums import TransportState
from .track import Track


@dataclass
class GroupSnapshot(DataClassDictMixin):
    """Transient view of a playback group, assembled per group listing."""

    id: str
    name: str
    coordinator_id: str
    status: TransportState = TransportState.UNKNOWN
    track: Track = field(default_factory=Track)
    average_volume: int = 0
    members: list[GroupMember] = field(default_factory=list)


@dataclass
class CommandResult(DataClassDictMixin):
    """Result of a transport or volume command."""

    ok: bool
    action: str
    id: str
    volume: int | None = None
