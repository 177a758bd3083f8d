"""Helper and utility functions."""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import unquote, urlparse

# pylint: disable=invalid-name
T = TypeVar("T")
# pylint: enable=invalid-name

# order matters: '&amp;' must be decoded last to prevent double unescaping
MARKUP_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&amp;", "&"),
)


def try_parse_int(possible_int: Any, default: int | None = 0) -> int | None:
    """Try to parse an int."""
    try:
        return int(possible_int)
    except (TypeError, ValueError):
        return default


def as_list(value: T | list[T] | None) -> list[T]:
    """Normalize a parsed node that may be absent, a single item or a list of items."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def unescape_entities(data: str) -> str:
    """Decode the (xml) entities in a string."""
    for entity, char in MARKUP_ENTITIES:
        data = data.replace(entity, char)
    return data


def unescape_markup(markup: str) -> str:
    """Decode entity-escaped metadata markup.

    Devices report the metadata markup either as-is or entity-escaped
    (e.g. '&lt;DIDL-Lite ...'). Markup that is already decoded is returned unchanged
    so entities within the text content (e.g. 'Simon &amp; Garfunkel') survive.
    """
    markup = markup.strip()
    if markup.startswith("&lt;"):
        return unescape_entities(markup)
    return markup


def canonicalize_uri(uri: str) -> str:
    """Return canonical form of a (remote) uri by decoding entity and percent escapes."""
    return unquote(unescape_entities(uri.strip()))


def host_from_location(location: str | None) -> str:
    """Return the hostname part of a location url, the path is discarded."""
    if not location:
        return ""
    return urlparse(location).hostname or ""


def is_absolute_url(uri: str | None) -> bool:
    """Return if the given uri is an absolute http(s) url."""
    return bool(uri) and uri.startswith(("http://", "https://"))
