"""Fixtures for testing the Sonos Now Playing engine."""

import pytest

from tests.common import KITCHEN, LIVING_ROOM, OFFICE, FakeControlClient, get_fixture


@pytest.fixture
async def speakers(control: FakeControlClient) -> FakeControlClient:
    """Make three speakers discoverable, grouped as Living Room + Kitchen and Office."""
    for device in (LIVING_ROOM, KITCHEN, OFFICE):
        control.add_device(device)
    zone_group_state = await get_fixture("zone_group_state.xml")
    for device in (LIVING_ROOM, KITCHEN, OFFICE):
        control.set_response(device.address, "GetZoneGroupState", {"ZoneGroupState": zone_group_state})
    return control
