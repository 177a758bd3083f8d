"""Group Aggregator: assembles the group listing and exposes the group commands."""

from __future__ import annotations

from typing import Any

from sonos_nowplaying.common.models.device import Device, DeviceSet, GroupMember, GroupTopologyEntry
from sonos_nowplaying.common.models.enums import TransportAction
from sonos_nowplaying.common.models.errors import GroupNotFoundError
from sonos_nowplaying.common.models.group import CommandResult, GroupSnapshot
from sonos_nowplaying.server.controllers.volume import validate_volume
from sonos_nowplaying.server.helpers.api import api_command
from sonos_nowplaying.server.models.core_controller import CoreController


def get_group_name(members: list[GroupMember], fallback: str = "") -> str:
    """Return the display name of a group: the first member, plus the number of others."""
    if not members:
        return fallback
    if len(members) == 1:
        return members[0].name
    return f"{members[0].name} +{len(members) - 1}"


class GroupsController(CoreController):
    """Aggregate topology, playback state, track and volume into group snapshots."""

    domain: str = "groups"

    @api_command("groups")
    async def list_groups(self) -> list[GroupSnapshot]:
        """Return a snapshot of every group whose coordinator is a registered device."""
        devices = await self.hub.devices.ensure_devices()
        topology = await self.hub.topology.resolve_topology(devices)
        groups: list[GroupSnapshot] = []
        for entry in topology:
            if not (coordinator := devices.get(entry.coordinator_id)):
                self.logger.debug("Skipping group of unknown coordinator %s", entry.coordinator_id)
                continue
            groups.append(await self._build_snapshot(coordinator, entry))
        return groups

    async def get_group(
        self, group_id: str, devices: DeviceSet | None = None
    ) -> GroupTopologyEntry:
        """Return the topology entry of a group by its id (the coordinator id)."""
        if devices is None:
            devices = await self.hub.devices.ensure_devices()
        if devices.get(group_id) is None:
            raise GroupNotFoundError(f"Group not found: {group_id}")
        for entry in await self.hub.topology.resolve_topology(devices):
            if entry.coordinator_id == group_id:
                return entry
        raise GroupNotFoundError(f"Group not found: {group_id}")

    @api_command("transport")
    async def dispatch_transport(
        self, action: TransportAction, group_id: str, params: dict[str, Any] | None = None
    ) -> CommandResult:
        """Dispatch a transport command to the coordinator of a group."""
        return await self.hub.transport.dispatch(action, group_id, params)

    @api_command("volume")
    async def get_or_set_volume(self, group_id: str, level: int | None = None) -> CommandResult:
        """Return the average volume of a group, or set it on every member if a level is given."""
        if level is not None:
            validate_volume(level)
            return await self.hub.transport.dispatch(
                TransportAction.VOLUME, group_id, {"level": level}
            )
        group = await self.get_group(group_id)
        volume = await self.hub.volume.average_volume(group.members)
        return CommandResult(ok=True, action=TransportAction.VOLUME.value, id=group_id, volume=volume)

    async def _build_snapshot(self, coordinator: Device, entry: GroupTopologyEntry) -> GroupSnapshot:
        state = await self.hub.playback.collect_playback_state(coordinator)
        track = await self.hub.metadata.resolve_track(
            state.position_info, state.media_info, coordinator.address, entry.members
        )
        average_volume = await self.hub.volume.average_volume(entry.members)
        return GroupSnapshot(
            id=coordinator.device_id,
            name=get_group_name(entry.members, coordinator.name),
            coordinator_id=coordinator.device_id,
            status=state.transport_state,
            track=track,
            average_volume=average_volume,
            members=entry.members,
        )
