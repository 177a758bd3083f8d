"""Tests for the Group Aggregator."""

import asyncio

import pytest

from sonos_nowplaying.common.models.enums import TrackSource, TransportState
from sonos_nowplaying.common.models.errors import DeviceUnreachableError, GroupNotFoundError
from sonos_nowplaying.server import SonosNowPlaying
from tests.common import (
    KITCHEN,
    LIVING_ROOM,
    OFFICE,
    FakeControlClient,
    FakeHttpSession,
    FakeResponse,
    didl,
    escape_markup,
)

SPOTIFY_URI = "x-sonos-spotify:spotify%3atrack%3a4uLU6hMCjMI75M1A2tKUQC?sid=9&flags=8224&sn=1"


@pytest.fixture
def playing(speakers: FakeControlClient, http_session: FakeHttpSession) -> FakeControlClient:
    """Living Room group playing a streaming track, Office stopped."""
    http_session.default = FakeResponse(200, b"jpeg")
    speakers.set_response(
        LIVING_ROOM.address,
        "GetPositionInfo",
        {
            "TrackURI": SPOTIFY_URI,
            "TrackMetaData": escape_markup(
                didl(
                    title="Never Gonna Give You Up",
                    artist="Rick Astley",
                    album="Whenever You Need Somebody",
                    art="/getaa?s=1&u=x-sonos-spotify%3aspotify%253atrack%253a4uLU6hMCjMI75M1A2tKUQC",
                )
            ),
        },
    )
    speakers.set_response(LIVING_ROOM.address, "GetTransportInfo", {"CurrentTransportState": "PLAYING"})
    speakers.set_response(OFFICE.address, "GetTransportInfo", {"CurrentTransportState": "STOPPED"})
    speakers.set_response(LIVING_ROOM.address, "GetVolume", {"CurrentVolume": "20"})
    speakers.set_response(KITCHEN.address, "GetVolume", {"CurrentVolume": "31"})
    speakers.set_response(OFFICE.address, "GetVolume", {"CurrentVolume": "10"})
    return speakers


async def test_list_groups(hub: SonosNowPlaying, playing: FakeControlClient) -> None:
    """Test the group listing."""
    groups = await hub.groups.list_groups()
    # the Bedroom group is dropped, its coordinator is not a registered device
    assert [x.id for x in groups] == [LIVING_ROOM.device_id, OFFICE.device_id]

    living_room = groups[0]
    assert living_room.name == "Living Room +1"
    assert living_room.coordinator_id == LIVING_ROOM.device_id
    assert living_room.status == TransportState.PLAYING
    assert living_room.average_volume == 26
    assert [(x.name, x.volume) for x in living_room.members] == [
        ("Living Room", 20),
        ("Kitchen", 31),
    ]
    track = living_room.track
    assert track.title == "Never Gonna Give You Up"
    assert track.artist == "Rick Astley"
    assert track.album == "Whenever You Need Somebody"
    assert track.source == TrackSource.STREAMING_SERVICE
    assert track.artwork.startswith("/cache/artwork/")

    office = groups[1]
    assert office.name == "Office"
    assert office.status == TransportState.STOPPED
    assert office.average_volume == 10
    assert office.track.title == ""
    assert office.track.artwork is None
    assert office.track.source == TrackSource.UNKNOWN


async def test_list_groups_unreachable_member(
    hub: SonosNowPlaying, playing: FakeControlClient
) -> None:
    """Test that an unreachable member degrades the listing instead of failing it."""
    playing.set_response(KITCHEN.address, "GetVolume", DeviceUnreachableError("down"))
    playing.set_response(OFFICE.address, "GetTransportInfo", DeviceUnreachableError("down"))
    groups = await hub.groups.list_groups()
    assert len(groups) == 2
    assert groups[0].average_volume == 20
    assert groups[0].members[1].volume is None
    assert groups[1].status == TransportState.UNKNOWN


async def test_list_groups_no_topology(hub: SonosNowPlaying, control: FakeControlClient) -> None:
    """Test the group listing without any (answering) device."""
    assert await hub.groups.list_groups() == []
    control.add_device(OFFICE)
    control.set_response(OFFICE.address, "GetZoneGroupState", DeviceUnreachableError("down"))
    await hub.devices.ensure_devices(force=True)
    assert await hub.groups.list_groups() == []


async def test_list_groups_concurrent(hub: SonosNowPlaying, playing: FakeControlClient) -> None:
    """Test concurrent listings share the discovery pass but nothing else."""
    first, second = await asyncio.gather(hub.groups.list_groups(), hub.groups.list_groups())
    assert [x.id for x in first] == [x.id for x in second]
    assert first[0].track.artwork == second[0].track.artwork
    assert playing.discover_calls == 1
    assert len(playing.calls_for("GetZoneGroupState")) == 2


async def test_get_group(hub: SonosNowPlaying, speakers: FakeControlClient) -> None:
    """Test looking up a group by its id."""
    group = await hub.groups.get_group(LIVING_ROOM.device_id)
    assert [x.device_id for x in group.members] == [LIVING_ROOM.device_id, KITCHEN.device_id]
    # a registered device that is not a coordinator
    with pytest.raises(GroupNotFoundError):
        await hub.groups.get_group(KITCHEN.device_id)
    with pytest.raises(GroupNotFoundError):
        await hub.groups.get_group("RINCON_BEDROOM01400")


async def test_get_or_set_volume(hub: SonosNowPlaying, playing: FakeControlClient) -> None:
    """Test reading and setting the volume of a group."""
    result = await hub.groups.get_or_set_volume(LIVING_ROOM.device_id)
    assert result.volume == 26
    assert playing.calls_for("SetVolume") == []
    result = await hub.groups.get_or_set_volume(LIVING_ROOM.device_id, 50)
    assert result.volume == 50
    assert [x.host for x in playing.calls_for("SetVolume")] == [
        LIVING_ROOM.address,
        KITCHEN.address,
    ]


async def test_dispatch_transport(hub: SonosNowPlaying, speakers: FakeControlClient) -> None:
    """Test dispatching a transport command to a group."""
    result = await hub.groups.dispatch_transport("next", LIVING_ROOM.device_id)
    assert result.ok
    assert [x.host for x in speakers.calls_for("Next")] == [LIVING_ROOM.address]
