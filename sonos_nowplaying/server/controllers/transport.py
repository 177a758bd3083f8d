"""Transport Command Dispatcher: issues transport and volume commands to a coordinator.

The dispatcher never tracks the transport state itself, the state of a
coordinator is only ever observed from what the device reports on the
next poll of the group listing.
"""

from __future__ import annotations

from typing import Any

from sonos_nowplaying.common.models.device import Device, DeviceSet
from sonos_nowplaying.common.models.enums import TransportAction
from sonos_nowplaying.common.models.errors import (
    ControlActionError,
    DeviceError,
    GroupNotFoundError,
    InvalidCommand,
    TransportCommandFailed,
)
from sonos_nowplaying.common.models.group import CommandResult
from sonos_nowplaying.constants import SERVICE_AV_TRANSPORT, UPNP_ERROR_INCOMPATIBLE_URI
from sonos_nowplaying.server.controllers.volume import validate_volume
from sonos_nowplaying.server.models.core_controller import CoreController

INSTANCE_ARGS = [("InstanceID", 0)]
PLAY_ARGS = [("InstanceID", 0), ("Speed", 1)]
SINGLE_SHOT_ACTIONS = {
    TransportAction.PAUSE: "Pause",
    TransportAction.NEXT: "Next",
    TransportAction.PREVIOUS: "Previous",
}


def is_recoverable_play_error(err: DeviceError) -> bool:
    """Return if a failed Play can be recovered by rebinding the transport uri."""
    return isinstance(err, ControlActionError) and (
        err.upnp_error_code == UPNP_ERROR_INCOMPATIBLE_URI
        or "incompatible transport uri" in str(err).lower()
    )


class TransportDispatcher(CoreController):
    """Dispatch transport commands to the coordinator of a group."""

    domain: str = "transport"

    async def dispatch(
        self,
        action: str,
        coordinator_id: str,
        params: dict[str, Any] | None = None,
    ) -> CommandResult:
        """Dispatch a transport command to the given coordinator."""
        try:
            action = TransportAction(action)
        except ValueError as err:
            raise InvalidCommand(f"Invalid transport action: {action}") from err
        params = params or {}
        level: int | None = None
        if action == TransportAction.VOLUME:
            # validated before any network call
            level = validate_volume(params.get("level"))

        devices = await self.hub.devices.ensure_devices()
        if not (coordinator := devices.get(coordinator_id)):
            raise GroupNotFoundError(f"Coordinator not found: {coordinator_id}")

        if action == TransportAction.PLAY:
            await self._play(coordinator, devices)
        elif action == TransportAction.VOLUME:
            group = await self.hub.groups.get_group(coordinator_id, devices)
            await self.hub.volume.set_volume(group.members, level)
        else:
            await self._single_shot(coordinator, SINGLE_SHOT_ACTIONS[action])
        self.logger.info("%s dispatched to %s", action.value, coordinator.name)
        return CommandResult(ok=True, action=action.value, id=coordinator_id, volume=level)

    async def _play(self, coordinator: Device, devices: DeviceSet) -> None:
        """Play, with one rebind-and-retry cycle on the recoverable protocol error."""
        error = await self._attempt(coordinator, "Play", PLAY_ARGS)
        if error is None:
            return
        if not is_recoverable_play_error(error):
            raise TransportCommandFailed(str(error)) from error

        self.logger.warning("Rebinding and retrying Play on %s", coordinator.name)
        await self._rebind(coordinator, devices)
        retry_error = await self._attempt(coordinator, "Play", PLAY_ARGS)
        if retry_error is None:
            return
        self.logger.debug("Retry of Play on %s failed: %s", coordinator.name, str(retry_error))
        raise TransportCommandFailed(str(error)) from error

    async def _rebind(self, coordinator: Device, devices: DeviceSet) -> None:
        """Bind the transport uri of every known device to the coordinator."""
        coordinator_uri = f"x-rincon:{coordinator.device_id}"
        for device in devices:
            try:
                await self.hub.control.invoke(
                    device.address,
                    SERVICE_AV_TRANSPORT,
                    "SetAVTransportURI",
                    [("InstanceID", 0), ("CurrentURI", coordinator_uri), ("CurrentURIMetaData", "")],
                )
            except DeviceError as err:
                self.logger.debug("Rebinding %s failed: %s", device.name, str(err))

    async def _single_shot(self, coordinator: Device, action: str) -> None:
        if (error := await self._attempt(coordinator, action, INSTANCE_ARGS)) is not None:
            raise TransportCommandFailed(str(error)) from error

    async def _attempt(
        self, coordinator: Device, action: str, args: list[tuple[str, Any]]
    ) -> DeviceError | None:
        """Invoke an AVTransport action once, return the error (if any)."""
        try:
            await self.hub.control.invoke(coordinator.address, SERVICE_AV_TRANSPORT, action, args)
        except DeviceError as err:
            return err
        return None
