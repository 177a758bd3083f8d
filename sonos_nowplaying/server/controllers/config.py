"""Logic to handle the (persistent) configuration settings."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import aiofiles

from sonos_nowplaying.common.helpers.json import JSON_DECODE_EXCEPTIONS, json_loads
from sonos_nowplaying.constants import (
    CONF_ARTWORK_DIR,
    CONF_ARTWORK_URL_PREFIX,
    CONF_DEVICE_TTL,
    CONF_DISCOVERY_TIMEOUT,
    CONF_ENRICHMENT_URL,
    CONF_REQUEST_TIMEOUT,
    DEFAULT_ARTWORK_URL_PREFIX,
    DEFAULT_DEVICE_TTL,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_ENRICHMENT_URL,
    DEFAULT_REQUEST_TIMEOUT,
    ROOT_LOGGER_NAME,
    SETTINGS_FILE,
)

if TYPE_CHECKING:
    from sonos_nowplaying.server import SonosNowPlaying

LOGGER = logging.getLogger(f"{ROOT_LOGGER_NAME}.config")


class ConfigController:
    """Controller that handles the configuration settings."""

    def __init__(self, hub: SonosNowPlaying, overrides: dict[str, Any] | None = None) -> None:
        """Initialize config controller."""
        self.hub = hub
        self.initialized = False
        self.filename = os.path.join(self.hub.storage_path, SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._defaults: dict[str, Any] = {
            CONF_DEVICE_TTL: DEFAULT_DEVICE_TTL,
            CONF_DISCOVERY_TIMEOUT: DEFAULT_DISCOVERY_TIMEOUT,
            CONF_REQUEST_TIMEOUT: DEFAULT_REQUEST_TIMEOUT,
            CONF_ARTWORK_DIR: os.path.join(self.hub.storage_path, "cache", "artwork"),
            CONF_ARTWORK_URL_PREFIX: DEFAULT_ARTWORK_URL_PREFIX,
            CONF_ENRICHMENT_URL: DEFAULT_ENRICHMENT_URL,
        }
        self._overrides = overrides or {}

    async def setup(self) -> None:
        """Async initialize of controller."""
        await self._load()
        self.initialized = True
        LOGGER.debug("Started.")

    def get(self, key: str, default: Any = None) -> Any:
        """Get value(s) for a specific key/path in the configuration.

        Lookup order is: explicit overrides, settings file, built-in defaults.
        """
        if key in self._overrides:
            return self._overrides[key]
        # we support a multi level hierarchy by providing the key as path,
        # with a slash (/) as splitter. Sort that out here.
        parent = self._data
        subkeys = key.split("/")
        for index, subkey in enumerate(subkeys):
            if not isinstance(parent, dict) or subkey not in parent:
                break
            if index == (len(subkeys) - 1):
                if (value := parent[subkey]) is not None:
                    return value
                break
            parent = parent[subkey]
        return self._defaults.get(key, default)

    async def _load(self) -> None:
        """Load data from the settings file (if present)."""
        try:
            async with aiofiles.open(self.filename, "r", encoding="utf-8") as _file:
                self._data = json_loads(await _file.read())
                LOGGER.debug("Loaded settings from %s", self.filename)
                return
        except FileNotFoundError:
            pass
        except JSON_DECODE_EXCEPTIONS:  # pylint: disable=catching-non-exception
            LOGGER.exception("Error while reading settings file %s", self.filename)
        LOGGER.debug("Started with default settings: No (valid) settings file found.")
