"""All constants for Sonos Now Playing."""

from typing import Final

ROOT_LOGGER_NAME: Final[str] = "sonos_nowplaying"
VERBOSE_LOG_LEVEL: Final[int] = 5

# config keys
CONF_DEVICE_TTL: Final[str] = "device_ttl"
CONF_DISCOVERY_TIMEOUT: Final[str] = "discovery_timeout"
CONF_REQUEST_TIMEOUT: Final[str] = "request_timeout"
CONF_ARTWORK_DIR: Final[str] = "artwork_dir"
CONF_ARTWORK_URL_PREFIX: Final[str] = "artwork_url_prefix"
CONF_ENRICHMENT_URL: Final[str] = "enrichment_url"
CONF_LOG_LEVEL: Final[str] = "log_level"

# config default values
DEFAULT_DEVICE_TTL: Final[float] = 60
DEFAULT_DISCOVERY_TIMEOUT: Final[float] = 5
DEFAULT_REQUEST_TIMEOUT: Final[float] = 9.5
DEFAULT_ARTWORK_URL_PREFIX: Final[str] = "/cache/artwork"
DEFAULT_ENRICHMENT_URL: Final[str] = "https://open.spotify.com/oembed"

SETTINGS_FILE: Final[str] = "settings.json"
LOG_FILE: Final[str] = "sonos_nowplaying.log"

# control protocol
DEVICE_HTTP_PORT: Final[int] = 1400
SERVICE_AV_TRANSPORT: Final[str] = "avTransport"
SERVICE_RENDERING_CONTROL: Final[str] = "renderingControl"
SERVICE_ZONE_GROUP_TOPOLOGY: Final[str] = "zoneGroupTopology"
# UPnP fault raised by Play when the transport is bound to an incompatible URI
UPNP_ERROR_INCOMPATIBLE_URI: Final[str] = "402"
NOT_IMPLEMENTED: Final[str] = "NOT_IMPLEMENTED"

# metadata fallbacks
RADIO_PLACEHOLDER_ARTWORK: Final[str] = "radio-default.jpg"
RADIO_DEFAULT_ARTIST: Final[str] = "Live Stream"
RADIO_DEFAULT_ALBUM: Final[str] = "Radio"
ENRICHMENT_TITLE_SUFFIX: Final[str] = " - topic"
