"""Playback State Collector: fetches the live transport and track state of a coordinator."""

from __future__ import annotations

from sonos_nowplaying.common.models.device import Device
from sonos_nowplaying.common.models.enums import TransportState
from sonos_nowplaying.common.models.errors import DeviceError
from sonos_nowplaying.common.models.track import PlaybackState
from sonos_nowplaying.constants import SERVICE_AV_TRANSPORT
from sonos_nowplaying.server.models.core_controller import CoreController

INSTANCE_ARGS = [("InstanceID", 0)]


class PlaybackCollector(CoreController):
    """Collect position, transport and media info of a coordinator."""

    domain: str = "playback"

    async def collect_playback_state(self, coordinator: Device) -> PlaybackState:
        """Collect the playback state of the given coordinator.

        Every query fails independently and yields empty defaults for that query only.
        """
        position_info = await self.get_position_info(coordinator.address)
        transport_info = await self._query(coordinator.address, "GetTransportInfo")
        # always attempted, streaming services sometimes only report the track here
        media_info = await self.get_media_info(coordinator.address)
        return PlaybackState(
            transport_state=TransportState.from_raw(transport_info.get("CurrentTransportState")),
            position_info=position_info,
            media_info=media_info,
        )

    async def get_position_info(self, host: str) -> dict[str, str]:
        """Return the position info (track uri and raw metadata) of a device."""
        return await self._query(host, "GetPositionInfo")

    async def get_media_info(self, host: str) -> dict[str, str]:
        """Return the media info of a device."""
        return await self._query(host, "GetMediaInfo")

    async def _query(self, host: str, action: str) -> dict[str, str]:
        """Invoke an AVTransport query, a failing query results in an empty dict."""
        try:
            return await self.hub.control.invoke(host, SERVICE_AV_TRANSPORT, action, INSTANCE_ARGS)
        except DeviceError as err:
            self.logger.debug("%s failed on %s: %s", action, host, str(err))
            return {}
