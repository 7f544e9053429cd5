"""Metadata records returned by the filesystem adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ATTRIBUTE_FILE_SIZE = "file_size"
ATTRIBUTE_LAST_MODIFIED = "last_modified"
ATTRIBUTE_MIME_TYPE = "mime_type"
ATTRIBUTE_VISIBILITY = "visibility"


class Visibility:
    """Visibility markers.

    WebDAV has no notion of visibility; every existing resource is public.
    """

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class FileAttributes:
    """Metadata of a file.

    Attributes the server did not report are ``None``. ``last_modified`` is a
    unix timestamp.
    """

    path: str
    file_size: int | None = None
    visibility: str | None = None
    last_modified: int | None = None
    mime_type: str | None = None
    extra_metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def type(self) -> str:
        return "file"

    def is_file(self) -> bool:
        return True

    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryAttributes:
    """Metadata of a directory (WebDAV collection)."""

    path: str
    visibility: str | None = None
    last_modified: int | None = None

    @property
    def type(self) -> str:
        return "dir"

    def is_file(self) -> bool:
        return False

    def is_dir(self) -> bool:
        return True


StorageAttributes = FileAttributes | DirectoryAttributes
