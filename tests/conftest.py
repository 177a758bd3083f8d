"""Fixtures for testing Sonos Now Playing."""

import logging
import pathlib
from collections.abc import AsyncGenerator

import pytest

from sonos_nowplaying.server import SonosNowPlaying
from tests.common import FakeClock, FakeControlClient, FakeHttpSession


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def control() -> FakeControlClient:
    """Return the fake control client used by the hub."""
    return FakeControlClient()


@pytest.fixture
def http_session() -> FakeHttpSession:
    """Return the fake http session used by the hub."""
    return FakeHttpSession()


@pytest.fixture
def clock() -> FakeClock:
    """Return the clock used by the hub."""
    return FakeClock()


@pytest.fixture
async def hub(
    tmp_path: pathlib.Path,
    control: FakeControlClient,
    http_session: FakeHttpSession,
    clock: FakeClock,
) -> AsyncGenerator[SonosNowPlaying, None]:
    """Start a Sonos Now Playing instance in test mode."""
    storage_path = tmp_path / "root"
    storage_path.mkdir(parents=True)

    hub = SonosNowPlaying(
        str(storage_path), control=control, http_session=http_session, clock=clock
    )
    await hub.start()

    try:
        yield hub
    finally:
        await hub.stop()
