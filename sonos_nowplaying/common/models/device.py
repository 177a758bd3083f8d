"""Model(s) for Devices and the group topology."""

from __future__ import annotations

from dataclasses import dataclass, field

from mashumaro import DataClassDictMixin


@dataclass(frozen=True)
class Device(DataClassDictMixin):
    """A reachable audio renderer that completed the registration handshake."""

    device_id: str
    address: str
    name: str
    model: str = "Unknown model"


@dataclass(frozen=True)
class DeviceSet(DataClassDictMixin):
    """Immutable snapshot of all registered devices, replaced wholesale on refresh."""

    devices: tuple[Device, ...] = field(default=())
    discovered_at: float = 0

    def __len__(self) -> int:
        """Return the number of registered devices."""
        return len(self.devices)

    def __iter__(self):
        """Iterate the registered devices."""
        return iter(self.devices)

    def get(self, device_id: str | None) -> Device | None:
        """Return device by its id."""
        for device in self.devices:
            if device.device_id == device_id:
                return device
        return None

    def get_by_address(self, address: str | None) -> Device | None:
        """Return device by its network address."""
        for device in self.devices:
            if device.address == address:
                return device
        return None


@dataclass
class GroupMember(DataClassDictMixin):
    """A member of a synchronized playback group."""

    name: str
    host: str
    device_id: str
    # filled in by the volume aggregation, None if the member could not be queried
    volume: int | None = None


@dataclass
class GroupTopologyEntry(DataClassDictMixin):
    """A coordinator and its ordered group members."""

    coordinator_id: str
    members: list[GroupMember] = field(default_factory=list)
