"""Volume Aggregator: per-group volume from the individual member volumes."""

from __future__ import annotations

from collections.abc import Iterable

from sonos_nowplaying.common.helpers.util import try_parse_int
from sonos_nowplaying.common.models.device import GroupMember
from sonos_nowplaying.common.models.errors import DeviceError, InvalidVolumeError
from sonos_nowplaying.constants import SERVICE_RENDERING_CONTROL
from sonos_nowplaying.server.models.core_controller import CoreController

MASTER_CHANNEL_ARGS = [("InstanceID", 0), ("Channel", "Master")]
MIN_VOLUME = 0
MAX_VOLUME = 100


def validate_volume(level: int) -> int:
    """Validate a volume level, raise InvalidVolumeError when out of range."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidVolumeError(f"Volume must be an integer, got {level!r}")
    if not MIN_VOLUME <= level <= MAX_VOLUME:
        raise InvalidVolumeError(f"Volume must be {MIN_VOLUME}-{MAX_VOLUME}, got {level}")
    return level


class VolumeAggregator(CoreController):
    """Query and set the volume of group members."""

    domain: str = "volume"

    async def get_volume(self, host: str) -> int:
        """Return the (master) volume of a single device."""
        result = await self.hub.control.invoke(
            host, SERVICE_RENDERING_CONTROL, "GetVolume", MASTER_CHANNEL_ARGS
        )
        volume = try_parse_int(result.get("CurrentVolume"), None)
        if volume is None:
            raise DeviceError(f"Invalid volume reported by {host}: {result}")
        return volume

    async def average_volume(self, members: Iterable[GroupMember]) -> int:
        """Return the rounded average volume of all members that could be queried.

        Every member's own volume is stored on the member (None if the query failed).
        """
        volumes: list[int] = []
        for member in members:
            try:
                member.volume = await self.get_volume(member.host)
            except DeviceError as err:
                member.volume = None
                self.logger.debug("GetVolume failed on %s: %s", member.name, str(err))
                continue
            volumes.append(member.volume)
        if not volumes:
            return 0
        # round half up, the average is never negative
        return int(sum(volumes) / len(volumes) + 0.5)

    async def set_volume(self, members: Iterable[GroupMember], level: int) -> int:
        """Set the volume on every member, return the number of members that accepted it."""
        validate_volume(level)
        success = 0
        for member in members:
            try:
                await self.hub.control.invoke(
                    member.host,
                    SERVICE_RENDERING_CONTROL,
                    "SetVolume",
                    [*MASTER_CHANNEL_ARGS, ("DesiredVolume", level)],
                )
            except DeviceError as err:
                self.logger.warning("SetVolume failed on %s: %s", member.name, str(err))
                continue
            member.volume = level
            success += 1
        return success
