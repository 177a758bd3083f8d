"""Helper(s) to parse DIDL Lite metadata as reported by Sonos/DLNA players."""

from __future__ import annotations

import logging
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from sonos_nowplaying.common.helpers.util import as_list, unescape_markup
from sonos_nowplaying.common.models.track import TrackMetadata
from sonos_nowplaying.constants import DEVICE_HTTP_PORT, NOT_IMPLEMENTED, ROOT_LOGGER_NAME

LOGGER = logging.getLogger(f"{ROOT_LOGGER_NAME}.didl_lite")

DIDL_ROOT = "DIDL-Lite"
TITLE_KEYS = ("r:streamContent", "dc:title")
ARTIST_KEYS = ("dc:creator",)
ALBUM_KEYS = ("upnp:album",)
ARTWORK_KEYS = ("upnp:albumArtURI", "r:albumArtURI", "albumArtURI")


def parse_didl_metadata(markup: str | None, host: str | None = None) -> TrackMetadata:
    """Parse (entity-escaped) DIDL Lite metadata into TrackMetadata.

    Markup that is absent, not implemented or lacks the DIDL-Lite root element
    results in an empty TrackMetadata instead of an error.
    Relative album art references are made absolute against the given host.
    """
    if not markup or not isinstance(markup, str) or markup == NOT_IMPLEMENTED:
        return TrackMetadata()
    markup = unescape_markup(markup)
    if f"<{DIDL_ROOT}" not in markup:
        return TrackMetadata()
    try:
        data = xmltodict.parse(markup)
    except ExpatError as err:
        LOGGER.debug("Unable to parse metadata markup: %s", str(err))
        return TrackMetadata()
    didl = data.get(DIDL_ROOT) or {}
    # an item may be reported as a single node or a list of nodes
    items = [x for x in as_list(didl.get("item")) if isinstance(x, dict)]
    if not items:
        return TrackMetadata()
    item = items[0]
    artwork = _first_text(item, ARTWORK_KEYS) or None
    if artwork and host:
        artwork = absolutize_art_url(artwork, host)
    return TrackMetadata(
        title=_first_text(item, TITLE_KEYS),
        artist=_first_text(item, ARTIST_KEYS),
        album=_first_text(item, ALBUM_KEYS),
        artwork=artwork,
    )


def absolutize_art_url(art_url: str, host: str) -> str:
    """Return absolute url for a (relative) album art reference served by a device."""
    if art_url.startswith("http"):
        return art_url
    if not art_url.startswith("/"):
        art_url = f"/{art_url}"
    return f"http://{host}:{DEVICE_HTTP_PORT}{art_url}"


def _first_text(item: dict[str, Any], keys: tuple[str, ...]) -> str:
    """Return the first non-empty text value for the given keys."""
    for key in keys:
        for node in as_list(item.get(key)):
            if text := _node_text(node):
                return text
    return ""


def _node_text(node: Any) -> str:
    """Return the text of a parsed node, which is a plain string or a dict with attributes."""
    if isinstance(node, dict):
        node = node.get("#text")
    if not isinstance(node, str):
        return ""
    return node.strip()
