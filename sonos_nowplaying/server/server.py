"""Main Sonos Now Playing class."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable
from typing import Any

import aiofiles
from aiohttp import ClientSession, ClientTimeout, TCPConnector

from sonos_nowplaying.common.models.api import (
    CommandMessage,
    ErrorResultMessage,
    ResultMessage,
    SuccessResultMessage,
)
from sonos_nowplaying.common.models.errors import InvalidCommand
from sonos_nowplaying.constants import (
    CONF_REQUEST_TIMEOUT,
    LOG_FILE,
    ROOT_LOGGER_NAME,
    VERBOSE_LOG_LEVEL,
)
from sonos_nowplaying.server.controllers.artwork import ArtworkCache
from sonos_nowplaying.server.controllers.config import ConfigController
from sonos_nowplaying.server.controllers.devices import DeviceRegistry
from sonos_nowplaying.server.controllers.groups import GroupsController
from sonos_nowplaying.server.controllers.metadata import MetadataResolver
from sonos_nowplaying.server.controllers.playback import PlaybackCollector
from sonos_nowplaying.server.controllers.topology import TopologyResolver
from sonos_nowplaying.server.controllers.transport import TransportDispatcher
from sonos_nowplaying.server.controllers.volume import VolumeAggregator
from sonos_nowplaying.server.helpers.api import APICommandHandler, api_command, parse_arguments
from sonos_nowplaying.server.helpers.soco_client import ControlClient
from sonos_nowplaying.server.helpers.util import get_package_version

LOGGER = logging.getLogger(ROOT_LOGGER_NAME)


class SonosNowPlaying:
    """Main Sonos Now Playing object."""

    config: ConfigController
    devices: DeviceRegistry
    topology: TopologyResolver
    playback: PlaybackCollector
    artwork: ArtworkCache
    metadata: MetadataResolver
    volume: VolumeAggregator
    transport: TransportDispatcher
    groups: GroupsController

    def __init__(
        self,
        storage_path: str,
        control: ControlClient | None = None,
        http_session: ClientSession | None = None,
        clock: Callable[[], float] = time.monotonic,
        config_overrides: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the Sonos Now Playing engine."""
        self.storage_path = storage_path
        self.control = control
        self.http_session = http_session
        self._owns_http_session = http_session is None
        self._clock = clock
        self._config_overrides = config_overrides
        # we dynamically register command handlers which can be consumed by the apis
        self.command_handlers: dict[str, APICommandHandler] = {}
        self.version: str = "0.0.0"

    async def start(self) -> None:
        """Start the Sonos Now Playing engine."""
        self.version = await get_package_version("sonos_nowplaying") or "0.0.0"
        # setup config controller first and fetch important config values
        self.config = ConfigController(self, self._config_overrides)
        await self.config.setup()
        LOGGER.info("Starting Sonos Now Playing version %s", self.version)
        request_timeout = self.config.get(CONF_REQUEST_TIMEOUT)
        if self.control is None:
            self.control = ControlClient(request_timeout)
        if self.http_session is None:
            # create shared aiohttp ClientSession
            self.http_session = ClientSession(
                timeout=ClientTimeout(total=request_timeout),
                connector=TCPConnector(ssl=False),
            )
        # setup other core controllers
        self.devices = DeviceRegistry(self, clock=self._clock)
        self.topology = TopologyResolver(self)
        self.playback = PlaybackCollector(self)
        self.artwork = ArtworkCache(self)
        self.metadata = MetadataResolver(self)
        self.volume = VolumeAggregator(self)
        self.transport = TransportDispatcher(self)
        self.groups = GroupsController(self)
        for controller in self._controllers:
            await controller.setup()
        self._register_api_commands()

    async def stop(self) -> None:
        """Stop the Sonos Now Playing engine."""
        LOGGER.info("Stop called, cleaning up...")
        for controller in reversed(self._controllers):
            await controller.close()
        # close/cleanup shared http session
        if self._owns_http_session and self.http_session:
            await self.http_session.close()

    @api_command("info")
    def get_info(self) -> dict[str, Any]:
        """Return Info of this instance."""
        return {
            "version": self.version,
            "storage_path": self.storage_path,
            "devices": len(self.devices.devices),
        }

    @api_command("logging/get")
    async def get_application_log(self) -> str:
        """Return the application log from file."""
        logfile = f"{self.storage_path}/{LOG_FILE}"
        async with aiofiles.open(logfile, "r") as _file:
            return await _file.read()

    def register_api_command(
        self,
        command: str,
        handler: Callable,
    ) -> None:
        """Dynamically register a command on the API."""
        if command in self.command_handlers:
            msg = f"Command {command} is already registered"
            raise RuntimeError(msg)
        self.command_handlers[command] = APICommandHandler.parse(command, handler)

    async def handle_command(
        self, command: str, args: dict[str, Any] | None = None
    ) -> ResultMessage:
        """Run an API command and wrap its outcome in a result message."""
        msg = CommandMessage(command, args)
        try:
            if not (handler := self.command_handlers.get(msg.command)):
                raise InvalidCommand(f"Invalid command: {msg.command}")
            try:
                parsed_args = parse_arguments(handler.signature, handler.type_hints, msg.args)
            except (KeyError, TypeError, ValueError) as err:
                raise InvalidCommand(f"Invalid arguments for {msg.command}: {err}") from err
            result = handler.target(**parsed_args)
            if inspect.isawaitable(result):
                result = await result
            return SuccessResultMessage(msg.command, result)
        except Exception as err:  # pylint: disable=broad-except
            if LOGGER.isEnabledFor(VERBOSE_LOG_LEVEL):
                LOGGER.exception("Error handling message: %s", msg)
            else:
                LOGGER.error("Error handling message: %s: %s", msg.command, str(err))
            return ErrorResultMessage(msg.command, getattr(err, "error_code", 999), str(err))

    @property
    def _controllers(self) -> tuple:
        return (
            self.devices,
            self.topology,
            self.playback,
            self.artwork,
            self.metadata,
            self.volume,
            self.transport,
            self.groups,
        )

    def _register_api_commands(self) -> None:
        """Register all methods decorated as api_command within a class(instance)."""
        for cls in (self, *self._controllers):
            for attr_name in dir(cls):
                if attr_name.startswith("__"):
                    continue
                obj = getattr(cls, attr_name)
                if hasattr(obj, "api_cmd"):
                    # method is decorated with our api decorator
                    self.register_api_command(obj.api_cmd, obj)
