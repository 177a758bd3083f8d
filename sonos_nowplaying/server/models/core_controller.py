"""Model/base for a Core controller within Sonos Now Playing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sonos_nowplaying.constants import CONF_LOG_LEVEL, ROOT_LOGGER_NAME

if TYPE_CHECKING:
    from sonos_nowplaying.server import SonosNowPlaying


class CoreController:
    """Base representation of a Core controller within Sonos Now Playing."""

    domain: str  # used as identifier (=name of the module)

    def __init__(self, hub: SonosNowPlaying) -> None:
        """Initialize the controller."""
        self.hub = hub
        self._set_logger()

    async def setup(self) -> None:
        """Async initialize of module."""

    async def close(self) -> None:
        """Handle logic on server stop."""

    def _set_logger(self) -> None:
        """Set the logger settings."""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{self.domain}")
        log_level = self.hub.config.get(f"{self.domain}/{CONF_LOG_LEVEL}", "GLOBAL")
        if log_level == "GLOBAL":
            self.logger.setLevel(root_logger.level)
        else:
            self.logger.setLevel("DEBUG" if log_level == "VERBOSE" else log_level)
