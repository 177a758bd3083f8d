"""Device Registry: discovers and caches the reachable devices."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from sonos_nowplaying.common.models.device import Device, DeviceSet
from sonos_nowplaying.common.models.errors import (
    DeviceError,
    DiscoveryFailedError,
    SonosNowPlayingError,
)
from sonos_nowplaying.constants import CONF_DEVICE_TTL, CONF_DISCOVERY_TIMEOUT
from sonos_nowplaying.server.helpers.api import api_command
from sonos_nowplaying.server.models.core_controller import CoreController

if TYPE_CHECKING:
    from sonos_nowplaying.server import SonosNowPlaying


class DeviceRegistry(CoreController):
    """Registry of all devices that completed the registration handshake."""

    domain: str = "devices"

    def __init__(self, hub: SonosNowPlaying, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the registry."""
        super().__init__(hub)
        self._clock = clock
        self._devices: DeviceSet | None = None
        self._refreshed_at: float | None = None
        self._pending: asyncio.Future[DeviceSet] | None = None

    @property
    def devices(self) -> DeviceSet:
        """Return the currently registered devices (without any I/O)."""
        return self._devices or DeviceSet()

    @property
    def is_fresh(self) -> bool:
        """Return if the registered devices are younger than the freshness window."""
        if self._devices is None or self._refreshed_at is None:
            return False
        ttl = self.hub.config.get(CONF_DEVICE_TTL)
        return (self._clock() - self._refreshed_at) < ttl

    async def ensure_devices(self, force: bool = False) -> DeviceSet:
        """Return the registered devices, running a discovery pass when needed.

        Concurrent calls while a discovery pass is in flight all share its result.
        """
        if not force and self.is_fresh:
            return self._devices
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._refresh())
            self._pending.add_done_callback(self._on_refresh_done)
        return await asyncio.shield(self._pending)

    @api_command("devices")
    async def list_devices(self) -> list[Device]:
        """Return all registered devices."""
        devices = await self.ensure_devices()
        return list(devices)

    @api_command("devices/refresh")
    async def refresh_devices(self) -> list[Device]:
        """Force a new discovery pass and return all registered devices."""
        devices = await self.ensure_devices(force=True)
        return list(devices)

    def _on_refresh_done(self, _task: asyncio.Future[DeviceSet]) -> None:
        self._pending = None
        if not _task.cancelled() and (err := _task.exception()):
            self.logger.debug("Device refresh failed: %s", str(err))

    async def _refresh(self) -> DeviceSet:
        """Run a discovery pass and register every found device."""
        self.logger.info("Discovering devices...")
        timeout = self.hub.config.get(CONF_DISCOVERY_TIMEOUT)
        try:
            async with asyncio.timeout(timeout + 1):
                hosts = await self.hub.control.discover(timeout)
        except TimeoutError as err:
            raise DiscoveryFailedError("Discovery did not finish in time") from err
        except SonosNowPlayingError:
            raise
        except Exception as err:  # pylint: disable=broad-except
            raise DiscoveryFailedError(f"Discovery failed: {err}") from err

        devices: list[Device] = []
        for host in hosts:
            try:
                device = await self.hub.control.get_device(host)
            except DeviceError as err:
                self.logger.warning("Failed to register device at %s: %s", host, str(err))
                continue
            devices.append(device)

        # the whole registry is replaced, devices that vanished are dropped
        self._devices = DeviceSet(devices=tuple(devices), discovered_at=self._clock())
        self._refreshed_at = self._devices.discovered_at
        self.logger.info("%s devices registered", len(devices))
        return self._devices
