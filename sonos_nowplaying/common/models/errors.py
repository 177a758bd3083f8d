"""Custom errors and exceptions."""


class SonosNowPlayingError(Exception):
    """Custom Exception for all errors."""

    error_code = 0

    def __init_subclass__(cls, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        """Register a subclass."""
        super().__init_subclass__(*args, **kwargs)
        ERROR_MAP[cls.error_code] = cls


# mapping from error_code to Exception class
ERROR_MAP: dict[int, type] = {0: SonosNowPlayingError, 999: SonosNowPlayingError}


class DeviceError(SonosNowPlayingError):
    """Base for errors raised while talking to a single device."""

    error_code = 1


class DeviceUnreachableError(DeviceError):
    """Error raised when a device did not answer (network/transport failure)."""

    error_code = 2


class ControlActionError(DeviceError):
    """Error raised when a device answered a control action with a UPnP fault."""

    error_code = 3

    def __init__(self, message: str, upnp_error_code: str | None = None) -> None:
        """Initialize the error with the (optional) UPnP fault code."""
        super().__init__(message)
        self.upnp_error_code = upnp_error_code


class DiscoveryFailedError(SonosNowPlayingError):
    """Error raised when the discovery pass itself failed."""

    error_code = 4


class GroupNotFoundError(SonosNowPlayingError):
    """Error raised when a group or coordinator id is not known."""

    error_code = 5


class InvalidVolumeError(SonosNowPlayingError):
    """Error raised when a volume level is outside the allowed range."""

    error_code = 6


class TransportCommandFailed(SonosNowPlayingError):
    """Error raised when a transport command could not be executed."""

    error_code = 7


class InvalidCommand(SonosNowPlayingError):
    """Error raised when an unknown command is requested on the API."""

    error_code = 8
