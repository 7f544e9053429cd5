"""Interpretation of PROPFIND property sets."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from dateutil import parser as date_parser

from .attributes import FileAttributes
from .debug import logger
from .internal.elements import (
    COLLECTION,
    DISPLAY_NAME,
    GET_CONTENT_LENGTH,
    GET_CONTENT_TYPE,
    GET_LAST_MODIFIED,
    IS_COLLECTION,
    RESOURCE_TYPE,
    ResourceType,
)

DIRECTORY_MIME_TYPE = "httpd/unix-directory"

# Requested on every metadata and listing call
PROPERTIES: tuple[str, ...] = (
    DISPLAY_NAME,
    GET_CONTENT_LENGTH,
    GET_CONTENT_TYPE,
    GET_LAST_MODIFIED,
    IS_COLLECTION,
    RESOURCE_TYPE,
)


def is_directory(entry: Mapping[str, Any]) -> bool:
    """Check whether a property set describes a collection.

    Servers disagree on how they flag collections, so each of the following
    is sufficient on its own:

    - ``getcontenttype`` is ``httpd/unix-directory``
    - ``resourcetype`` contains ``{DAV:}collection``
    - ``iscollection`` is ``"1"``

    Args:
        entry: Property name to value mapping as returned by the client

    Returns:
        True if the entry is a directory
    """
    resource_type = entry.get(RESOURCE_TYPE)
    return (
        entry.get(GET_CONTENT_TYPE) == DIRECTORY_MIME_TYPE
        or (isinstance(resource_type, ResourceType) and resource_type.is_type(COLLECTION))
        or entry.get(IS_COLLECTION) == "1"
    )


# Two defaults that differ in every field; a complete HTTP-date parses to the
# same value under both
_DEFAULT_A = datetime(1970, 1, 1, 0, 0, 0)
_DEFAULT_B = datetime(2001, 2, 2, 1, 1, 1)


def parse_last_modified(value: str | None) -> int | None:
    """Parse a ``getlastmodified`` HTTP-date into a unix timestamp.

    Missing, unparseable and incomplete values (``"Tue"``, ``"12"``) all give
    None.
    """
    if not value:
        return None

    try:
        parsed = date_parser.parse(value, default=_DEFAULT_A)
        complete = parsed == date_parser.parse(value, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        complete = False

    if not complete:
        logger.warning(f"Ignoring unparseable last-modified value: {value!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp())


def parse_content_length(value: str | None) -> int | None:
    """Parse a ``getcontentlength`` value, None if missing or not a number."""
    if value is None or value == "":
        return None

    try:
        return int(value.strip())
    except ValueError:
        logger.warning(f"Ignoring non-numeric content length: {value!r}")
        return None


def parse_item(path: str, entry: Mapping[str, Any]) -> FileAttributes:
    """Build file metadata from a property set.

    Absent properties become None. The raw ``iscollection`` value is kept in
    ``extra_metadata`` for diagnostics.

    Args:
        path: Logical path of the entry
        entry: Property name to value mapping

    Returns:
        FileAttributes for the entry
    """
    return FileAttributes(
        path=path,
        file_size=parse_content_length(entry.get(GET_CONTENT_LENGTH)),
        last_modified=parse_last_modified(entry.get(GET_LAST_MODIFIED)),
        mime_type=entry.get(GET_CONTENT_TYPE) or None,
        extra_metadata={IS_COLLECTION: entry.get(IS_COLLECTION)},
    )
