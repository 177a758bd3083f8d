"""Async adapter around the SoCo library for discovery and control actions.

Every call towards a device runs the blocking SoCo code in a worker thread
and translates SoCo/requests errors into our own exception types.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from requests.exceptions import RequestException
from soco import SoCo
from soco import config as soco_config
from soco.discovery import discover
from soco.exceptions import SoCoException, SoCoUPnPException

from sonos_nowplaying.common.models.device import Device
from sonos_nowplaying.common.models.errors import (
    ControlActionError,
    DeviceUnreachableError,
    DiscoveryFailedError,
)
from sonos_nowplaying.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    ROOT_LOGGER_NAME,
    VERBOSE_LOG_LEVEL,
)

_R = TypeVar("_R")
_P = ParamSpec("_P")
LOGGER = logging.getLogger(f"{ROOT_LOGGER_NAME}.soco")

ActionArgs = list[tuple[str, Any]]


def soco_error(func: Callable[_P, _R]) -> Callable[_P, _R]:
    """Translate SoCo/network errors raised by the decorated (blocking) function."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        try:
            return func(*args, **kwargs)
        except SoCoUPnPException as err:
            raise ControlActionError(str(err), err.error_code) from err
        except (OSError, RequestException, SoCoException) as err:
            raise DeviceUnreachableError(f"Error calling {func.__name__}: {err}") from err
        except Exception as err:  # pylint: disable=broad-except
            # e.g. a reply body that is not valid xml while the device reboots
            raise DeviceUnreachableError(f"Invalid reply in {func.__name__}: {err!r}") from err

    return wrapper


class ControlClient:
    """Client for the LAN control protocol of the audio renderers."""

    def __init__(self, request_timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        """Initialize the client."""
        self.request_timeout = request_timeout
        soco_config.REQUEST_TIMEOUT = request_timeout

    async def discover(self, timeout: float) -> list[str]:
        """Run a bounded discovery pass and return the addresses of the found devices."""

        def _discover() -> list[str]:
            try:
                discovered: set[SoCo] | None = discover(timeout=int(max(timeout, 1)))
            except (OSError, SoCoException) as err:
                raise DiscoveryFailedError(f"Discovery failed: {err}") from err
            return sorted(x.ip_address for x in discovered or ())

        return await asyncio.to_thread(_discover)

    async def get_device(self, host: str) -> Device:
        """Perform the registration handshake with the device at the given address."""
        return await asyncio.to_thread(self._get_device, host)

    async def invoke(
        self,
        host: str,
        service: str,
        action: str,
        args: ActionArgs | None = None,
    ) -> dict[str, str]:
        """Invoke a named control action on a service of the device at the given address."""
        if LOGGER.isEnabledFor(VERBOSE_LOG_LEVEL):
            LOGGER.log(VERBOSE_LOG_LEVEL, "Invoking %s.%s on %s: %s", service, action, host, args)
        return await asyncio.to_thread(self._invoke, host, service, action, args or [])

    @soco_error
    def _get_device(self, host: str) -> Device:
        soco = SoCo(host)
        speaker_info = soco.get_speaker_info(refresh=True, timeout=self.request_timeout)
        return Device(
            device_id=soco.uid,
            address=host,
            name=speaker_info.get("zone_name") or soco.player_name,
            model=speaker_info.get("model_name") or "Unknown model",
        )

    @soco_error
    def _invoke(self, host: str, service: str, action: str, args: ActionArgs) -> dict[str, str]:
        upnp_service = getattr(SoCo(host), service)
        result = getattr(upnp_service, action)(args, timeout=self.request_timeout)
        # actions without output arguments return True
        return result if isinstance(result, dict) else {}
