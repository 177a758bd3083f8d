"""Common test helpers for Sonos Now Playing tests."""

from __future__ import annotations

import asyncio
import pathlib
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import MagicMock
from xml.sax.saxutils import escape

import aiofiles

from sonos_nowplaying.common.models.device import Device

KITCHEN = Device("RINCON_KITCHEN01400", "192.168.1.10", "Kitchen", "Play:1")
LIVING_ROOM = Device("RINCON_LIVING01400", "192.168.1.11", "Living Room", "Arc")
OFFICE = Device("RINCON_OFFICE01400", "192.168.1.12", "Office", "One")


def _get_fixture_folder() -> pathlib.Path:
    return pathlib.Path(__file__).parent / "fixtures"


async def get_fixture(filename: str) -> str:
    """Return the contents of a fixture file."""
    async with aiofiles.open(_get_fixture_folder() / filename, "r", encoding="utf-8") as fp:
        return (await fp.read()).strip()


def escape_markup(markup: str) -> str:
    """Entity-escape markup the way devices embed it in action responses."""
    return escape(markup, {'"': "&quot;"})


def didl(
    title: str = "",
    artist: str = "",
    album: str = "",
    art: str = "",
    stream_content: str = "",
) -> str:
    """Return (unescaped) DIDL-Lite markup for a single item."""
    parts = []
    if stream_content:
        parts.append(f"<r:streamContent>{escape(stream_content)}</r:streamContent>")
    if title:
        parts.append(f"<dc:title>{escape(title)}</dc:title>")
    if artist:
        parts.append(f"<dc:creator>{escape(artist)}</dc:creator>")
    if album:
        parts.append(f"<upnp:album>{escape(album)}</upnp:album>")
    if art:
        parts.append(f"<upnp:albumArtURI>{escape(art)}</upnp:albumArtURI>")
    return (
        '<DIDL-Lite xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:upnp="urn:schemas-upnp-org:metadata-1-0/upnp/" '
        'xmlns:r="urn:schemas-rinconnetworks-com:metadata-1-0/" '
        'xmlns="urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/">'
        f'<item id="-1" parentID="-1" restricted="true">{"".join(parts)}</item>'
        "</DIDL-Lite>"
    )


@dataclass
class ActionCall:
    """A control action invoked on the fake control client."""

    host: str
    service: str
    action: str
    args: list[tuple[str, Any]] = field(default_factory=list)


class FakeControlClient:
    """In-memory replacement of the ControlClient.

    Responses are registered per (host, action). Multiple responses are returned
    in order, the last one is repeated. A response that is an exception is raised.
    """

    def __init__(self) -> None:
        """Initialize the fake."""
        self.hosts: list[str] = []
        self.devices: dict[str, Device | Exception] = {}
        self.responses: dict[tuple[str, str], list[Any]] = {}
        self.calls: list[ActionCall] = []
        self.discover_calls = 0
        self.discover_delay: float = 0
        self.discover_error: Exception | None = None

    def add_device(self, device: Device) -> None:
        """Make a device discoverable."""
        self.hosts.append(device.address)
        self.devices[device.address] = device

    def set_response(self, host: str, action: str, *responses: Any) -> None:
        """Register the response(s) of an action on a host."""
        self.responses[(host, action)] = list(responses)

    def calls_for(self, action: str, host: str | None = None) -> list[ActionCall]:
        """Return all recorded calls of an action (optionally on a single host)."""
        return [x for x in self.calls if x.action == action and host in (None, x.host)]

    async def discover(self, timeout: float) -> list[str]:
        """Return the discoverable hosts."""
        self.discover_calls += 1
        await asyncio.sleep(self.discover_delay)
        if self.discover_error is not None:
            raise self.discover_error
        return list(self.hosts)

    async def get_device(self, host: str) -> Device:
        """Return the device registered at the host."""
        await asyncio.sleep(0)
        device = self.devices[host]
        if isinstance(device, Exception):
            raise device
        return device

    async def invoke(
        self,
        host: str,
        service: str,
        action: str,
        args: list[tuple[str, Any]] | None = None,
    ) -> dict[str, str]:
        """Record the call and return the registered response."""
        self.calls.append(ActionCall(host, service, action, list(args or [])))
        await asyncio.sleep(0)
        queue = self.responses.get((host, action))
        if not queue:
            return {}
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return dict(response)


class FakeResponse:
    """Minimal stand-in for an aiohttp ClientResponse."""

    def __init__(self, status: int = 200, body: bytes = b"", data: Any = None) -> None:
        """Initialize the response."""
        self.status = status
        self.body = body
        self.data = data

    async def __aenter__(self) -> FakeResponse:
        """Enter the response context."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Exit the response context."""

    async def read(self) -> bytes:
        """Return the raw body."""
        return self.body

    async def json(self, content_type: str | None = "application/json") -> Any:
        """Return the decoded body."""
        if isinstance(self.data, Exception):
            raise self.data
        return self.data


class FakeHttpSession:
    """Minimal stand-in for an aiohttp ClientSession (only GET is supported)."""

    def __init__(self, default: FakeResponse | None = None) -> None:
        """Initialize the session."""
        self.responses: dict[str, FakeResponse | Exception] = {}
        self.default = default or FakeResponse(404)
        self.requests: list[tuple[str, dict[str, Any] | None]] = []
        self.closed = False

    def get(self, url: str, params: dict[str, Any] | None = None, **kwargs: Any) -> FakeResponse:
        """Record the request and return the registered response."""
        self.requests.append((url, params))
        response = self.responses.get(url, self.default)
        if isinstance(response, Exception):
            raise response
        return response

    def requested_urls(self) -> list[str]:
        """Return the urls of all requests."""
        return [url for url, _ in self.requests]

    async def close(self) -> None:
        """Close the session."""
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000) -> None:
        """Initialize the clock."""
        self.now = now

    def __call__(self) -> float:
        """Return the current time."""
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.now += seconds


GET_VOLUME_REPLY = (
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"'
    ' s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/"><s:Body>'
    '<u:GetVolumeResponse xmlns:u="urn:schemas-upnp-org:service:RenderingControl:1">'
    "<CurrentVolume>40</CurrentVolume></u:GetVolumeResponse></s:Body></s:Envelope>"
)


def soap_reply(url: str, **kwargs: Any) -> MagicMock:
    """Answer a control request: garbage from the (rebooting) living room, volume 40 otherwise."""
    if LIVING_ROOM.address in url:
        return MagicMock(status_code=200, text="<html>rebooting", headers={})
    return MagicMock(status_code=200, text=GET_VOLUME_REPLY, headers={})
