"""Metadata Resolution Pipeline: produces the normalized now playing Track.

The pipeline runs a strict-precedence chain of fallbacks. Every stage only
fills the fields of the Track that are still empty:

1. metadata of the coordinator's position info (or the first group member
   that reports a title when the coordinator does not)
2. metadata of the coordinator's media info
3. placeholder artwork for internet radio
4. enrichment lookup for streaming-service tracks
5. dedicated media info query for radio/streams (station art and defaults)
6. classification of the source from the track uri
7. resolving the artwork into a local reference through the artwork cache
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from aiohttp.client_exceptions import ClientError

from sonos_nowplaying.common.models.enums import TrackSource
from sonos_nowplaying.common.models.track import Track, TrackMetadata
from sonos_nowplaying.constants import (
    CONF_ENRICHMENT_URL,
    ENRICHMENT_TITLE_SUFFIX,
    NOT_IMPLEMENTED,
    RADIO_DEFAULT_ALBUM,
    RADIO_DEFAULT_ARTIST,
    RADIO_PLACEHOLDER_ARTWORK,
)
from sonos_nowplaying.server.helpers.didl_lite import parse_didl_metadata
from sonos_nowplaying.server.models.core_controller import CoreController

if TYPE_CHECKING:
    from sonos_nowplaying.common.models.device import GroupMember

STREAMING_TRACK_REGEX = re.compile(r"spotify:track:([A-Za-z0-9]+)", re.IGNORECASE)
STREAMING_URI_MARKERS = ("spotify",)
RADIO_URI_PREFIXES = (
    "x-sonosapi-stream:",
    "x-sonosapi-radio:",
    "x-sonosapi-hls:",
    "x-rincon-mp3radio:",
    "hls-radio:",
    "aac:",
)
RADIO_URI_MARKERS = ("tunein",)


def streaming_track_id(uri: str | None) -> str | None:
    """Return the streaming-service track id embedded in a (percent-encoded) uri."""
    if not uri:
        return None
    if match := STREAMING_TRACK_REGEX.search(unquote(uri)):
        return match.group(1)
    return None


def is_streaming_uri(uri: str | None) -> bool:
    """Return if the uri belongs to the streaming service."""
    uri = (uri or "").lower()
    return any(marker in uri for marker in STREAMING_URI_MARKERS)


def is_radio_uri(uri: str | None) -> bool:
    """Return if the uri is an internet radio station or stream."""
    uri = (uri or "").lower()
    return uri.startswith(RADIO_URI_PREFIXES) or any(x in uri for x in RADIO_URI_MARKERS)


def is_queue_uri(uri: str | None) -> bool:
    """Return if the uri is anything else that was loaded (from the local queue)."""
    return bool(uri)


# evaluated in order, the first matching predicate determines the source
SOURCE_CLASSIFIERS: tuple[tuple[Callable[[str | None], bool], TrackSource], ...] = (
    (is_streaming_uri, TrackSource.STREAMING_SERVICE),
    (is_radio_uri, TrackSource.INTERNET_RADIO),
    (is_queue_uri, TrackSource.LOCAL_QUEUE),
)


def classify_source(uri: str | None) -> TrackSource:
    """Classify the source of a track from its uri."""
    for predicate, source in SOURCE_CLASSIFIERS:
        if predicate(uri):
            return source
    return TrackSource.UNKNOWN


def clean_enrichment_title(title: str | None) -> str:
    """Strip the known trailing suffix from a title returned by the enrichment lookup."""
    title = (title or "").strip()
    if title.lower().endswith(ENRICHMENT_TITLE_SUFFIX):
        title = title[: -len(ENRICHMENT_TITLE_SUFFIX)].rstrip()
    return title


class MetadataResolver(CoreController):
    """Resolve the normalized Track of a group from the collected playback state."""

    domain: str = "metadata"

    @property
    def placeholder_artwork(self) -> str:
        """Return the (local) placeholder artwork for internet radio."""
        return self.hub.artwork.local_reference(RADIO_PLACEHOLDER_ARTWORK)

    async def resolve_track(
        self,
        position_info: dict[str, Any],
        media_info: dict[str, Any],
        coordinator_host: str,
        members: Iterable[GroupMember] = (),
    ) -> Track:
        """Resolve the Track from the position and media info of a coordinator."""
        track = Track(uri=position_info.get("TrackURI") or "")

        # position info of the coordinator, or any member if the coordinator has no title
        metadata = parse_didl_metadata(position_info.get("TrackMetaData"), coordinator_host)
        if not metadata.title:
            metadata = await self._get_member_metadata(members) or metadata
        track.fill(metadata)

        # media info, streaming sources often report richer data here
        track.fill(
            parse_didl_metadata(
                media_info.get("CurrentURIMetaData")
                or media_info.get("EnqueuedTransportURIMetaData"),
                coordinator_host,
            )
        )

        if not track.artwork and is_radio_uri(track.uri):
            track.artwork = self.placeholder_artwork

        if not track.artwork and (track_id := streaming_track_id(track.uri)):
            track.fill(await self.get_enrichment(track_id))

        if is_radio_uri(track.uri):
            await self._resolve_radio_metadata(track, coordinator_host)

        track.source = classify_source(track.uri)

        if not self.hub.artwork.is_local_reference(track.artwork):
            track.artwork = await self.hub.artwork.cache_artwork(track.artwork)
        return track

    async def get_enrichment(self, track_id: str) -> TrackMetadata:
        """Lookup cover art and title of a streaming-service track (empty on failure)."""
        url = self.hub.config.get(CONF_ENRICHMENT_URL)
        params = {"url": f"spotify:track:{track_id}"}
        try:
            async with self.hub.http_session.get(url, params=params) as resp:
                if resp.status != 200:
                    self.logger.debug("Enrichment of %s failed: status %s", track_id, resp.status)
                    return TrackMetadata()
                data = await resp.json(content_type=None)
        except (ClientError, TimeoutError, ValueError) as err:
            self.logger.debug("Enrichment of %s failed: %s", track_id, str(err))
            return TrackMetadata()
        if not isinstance(data, dict):
            return TrackMetadata()
        return TrackMetadata(
            title=clean_enrichment_title(data.get("title")),
            artwork=data.get("thumbnail_url") or None,
        )

    async def _get_member_metadata(self, members: Iterable[GroupMember]) -> TrackMetadata | None:
        """Return the metadata of the first group member that reports a title."""
        for member in members:
            position_info = await self.hub.playback.get_position_info(member.host)
            raw_metadata = position_info.get("TrackMetaData") or ""
            if NOT_IMPLEMENTED in raw_metadata:
                continue
            metadata = parse_didl_metadata(raw_metadata, member.host)
            if metadata.title:
                self.logger.debug("Metadata found via member %s", member.name)
                return metadata
        return None

    async def _resolve_radio_metadata(self, track: Track, coordinator_host: str) -> None:
        """Backfill station artwork and defaults for radio and streams."""
        media_info = await self.hub.playback.get_media_info(coordinator_host)
        metadata = parse_didl_metadata(media_info.get("CurrentURIMetaData"), coordinator_host)
        # real station art supersedes the placeholder
        if metadata.artwork and (not track.artwork or track.artwork == self.placeholder_artwork):
            track.artwork = metadata.artwork
        track.fill(
            TrackMetadata(
                title=metadata.title,
                artist=metadata.artist or RADIO_DEFAULT_ARTIST,
                album=metadata.album or RADIO_DEFAULT_ALBUM,
            )
        )
