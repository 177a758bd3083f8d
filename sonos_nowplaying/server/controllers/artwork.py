"""Artwork Cache: content-addressed local cache of remote artwork."""

from __future__ import annotations

import hashlib
import os

import aiofiles
from aiofiles.os import makedirs, wrap
from aiohttp.client_exceptions import ClientError

from sonos_nowplaying.common.helpers.util import canonicalize_uri, is_absolute_url
from sonos_nowplaying.constants import CONF_ARTWORK_DIR, CONF_ARTWORK_URL_PREFIX
from sonos_nowplaying.server.models.core_controller import CoreController

isfile = wrap(os.path.isfile)
ARTWORK_EXTENSION = ".jpg"


class ArtworkCache(CoreController):
    """Filesystem backed artwork cache, keyed by a hash of the canonical remote uri.

    Entries never expire: a changed image behind the same uri is not picked up.
    """

    domain: str = "artwork"

    @property
    def cache_dir(self) -> str:
        """Return the directory where the artwork is stored."""
        return self.hub.config.get(CONF_ARTWORK_DIR)

    @property
    def url_prefix(self) -> str:
        """Return the prefix of the local artwork references."""
        return self.hub.config.get(CONF_ARTWORK_URL_PREFIX).rstrip("/")

    async def setup(self) -> None:
        """Async initialize of the artwork cache."""
        await makedirs(self.cache_dir, exist_ok=True)

    def is_local_reference(self, reference: str | None) -> bool:
        """Return if the given reference points into the local artwork namespace."""
        return bool(reference) and reference.startswith(f"{self.url_prefix}/")

    def local_reference(self, filename: str) -> str:
        """Return the local reference for a filename within the cache."""
        return f"{self.url_prefix}/{filename}"

    def get_local_file(self, reference: str) -> str | None:
        """Return the file on disk for a local artwork reference (if valid)."""
        if not self.is_local_reference(reference):
            return None
        filename = reference.removeprefix(f"{self.url_prefix}/")
        if not filename or "/" in filename or "\\" in filename or filename.startswith("."):
            return None
        return os.path.join(self.cache_dir, filename)

    async def cache_artwork(self, remote_uri: str | None) -> str | None:
        """Return the local reference for a remote artwork uri, fetching it once if needed.

        Returns None for absent or non-absolute input and when the fetch failed.
        """
        if not is_absolute_url(remote_uri):
            return None
        canonical_uri = canonicalize_uri(remote_uri)
        filename = hashlib.md5(canonical_uri.encode()).hexdigest() + ARTWORK_EXTENSION
        file_path = os.path.join(self.cache_dir, filename)
        if await isfile(file_path):
            return self.local_reference(filename)

        try:
            async with self.hub.http_session.get(canonical_uri) as resp:
                if resp.status != 200:
                    self.logger.warning(
                        "Artwork fetch failed: %s (status %s)", canonical_uri, resp.status
                    )
                    return None
                img_data = await resp.read()
        except (ClientError, TimeoutError) as err:
            self.logger.warning("Artwork fetch failed: %s: %s", canonical_uri, str(err))
            return None

        # concurrent writers of the same uri write identical content
        await makedirs(self.cache_dir, exist_ok=True)
        async with aiofiles.open(file_path, "wb") as _file:
            await _file.write(img_data)
        self.logger.debug("Cached artwork %s -> %s", canonical_uri, file_path)
        return self.local_reference(filename)
