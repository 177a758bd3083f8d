"""Topology Resolver: builds the coordinator to members mapping."""

from __future__ import annotations

from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from sonos_nowplaying.common.helpers.util import as_list, host_from_location, unescape_markup
from sonos_nowplaying.common.models.device import DeviceSet, GroupMember, GroupTopologyEntry
from sonos_nowplaying.common.models.errors import DeviceError
from sonos_nowplaying.constants import SERVICE_ZONE_GROUP_TOPOLOGY
from sonos_nowplaying.server.models.core_controller import CoreController


class TopologyResolver(CoreController):
    """Resolve the group topology from any responding device."""

    domain: str = "topology"

    async def resolve_topology(self, devices: DeviceSet) -> list[GroupTopologyEntry]:
        """Return the current group topology.

        The topology is cluster-wide so the devices are probed one by one
        until the first one answers. No answer at all results in an empty list.
        """
        for device in devices:
            try:
                result = await self.hub.control.invoke(
                    device.address, SERVICE_ZONE_GROUP_TOPOLOGY, "GetZoneGroupState"
                )
            except DeviceError as err:
                self.logger.debug(
                    "Topology query failed on %s: %s", device.name or device.address, str(err)
                )
                continue
            if not (zone_group_state := result.get("ZoneGroupState")):
                continue
            try:
                return parse_zone_group_state(zone_group_state)
            except ExpatError as err:
                self.logger.warning(
                    "Invalid topology reported by %s: %s", device.name or device.address, str(err)
                )
        self.logger.debug("No device answered the topology query")
        return []


def parse_zone_group_state(zone_group_state: str) -> list[GroupTopologyEntry]:
    """Parse the (escaped) ZoneGroupState markup into topology entries."""
    data: dict[str, Any] = xmltodict.parse(unescape_markup(zone_group_state)) or {}
    # the zone groups are reported with or without the ZoneGroupState root
    root = data.get("ZoneGroupState") or data
    if not isinstance(root, dict):
        return []
    if isinstance(zone_groups := root.get("ZoneGroups"), dict):
        root = zone_groups

    groups: dict[str, GroupTopologyEntry] = {}
    for zone_group in as_list(root.get("ZoneGroup")):
        if not isinstance(zone_group, dict):
            continue
        if not (coordinator_id := zone_group.get("@Coordinator")):
            continue
        members = [
            GroupMember(
                name=member.get("@ZoneName", ""),
                host=host_from_location(member.get("@Location")),
                device_id=member.get("@UUID", ""),
            )
            for member in as_list(zone_group.get("ZoneGroupMember"))
            if isinstance(member, dict)
        ]
        # a repeated coordinator id should not happen, last one wins
        groups[coordinator_id] = GroupTopologyEntry(coordinator_id=coordinator_id, members=members)
    return list(groups.values())
