"""Typed failures raised by the filesystem adapter.

Every failure carries the kind of operation that failed, the path(s) involved
and a human readable reason. The transport error that caused it, if any, is
chained as ``__cause__``.
"""

from __future__ import annotations

from enum import Enum

from .attributes import (
    ATTRIBUTE_FILE_SIZE,
    ATTRIBUTE_LAST_MODIFIED,
    ATTRIBUTE_MIME_TYPE,
    ATTRIBUTE_VISIBILITY,
)


class OperationKind(str, Enum):
    """Operation a failure belongs to."""

    WRITE = "write"
    READ = "read"
    DELETE_FILE = "delete_file"
    DELETE_DIRECTORY = "delete_directory"
    CREATE_DIRECTORY = "create_directory"
    MOVE = "move"
    COPY = "copy"
    RETRIEVE_METADATA = "retrieve_metadata"
    SET_VISIBILITY = "set_visibility"
    CHECK_EXISTENCE = "check_existence"
    PROPFIND = "propfind"


class FilesystemError(Exception):
    """Base class of every failure raised by the adapter."""

    operation: OperationKind

    def __init__(self, message: str, location: str = "", reason: str = ""):
        super().__init__(message)
        self.location = location
        self.reason = reason

    @property
    def paths(self) -> tuple[str, ...]:
        return (self.location,)


def _with_reason(message: str, reason: str) -> str:
    return f"{message}. {reason}" if reason else message


class WriteFailed(FilesystemError):
    operation = OperationKind.WRITE

    @classmethod
    def at_location(cls, location: str, reason: str = "") -> WriteFailed:
        return cls(
            _with_reason(f"Unable to write file at location: {location}", reason),
            location,
            reason,
        )


class ReadFailed(FilesystemError):
    operation = OperationKind.READ

    @classmethod
    def from_location(cls, location: str, reason: str = "") -> ReadFailed:
        return cls(
            _with_reason(f"Unable to read file from location: {location}", reason),
            location,
            reason,
        )


class DeleteFileFailed(FilesystemError):
    operation = OperationKind.DELETE_FILE

    @classmethod
    def at_location(cls, location: str, reason: str = "") -> DeleteFileFailed:
        return cls(
            _with_reason(f"Unable to delete file located at: {location}", reason),
            location,
            reason,
        )


class DeleteDirectoryFailed(FilesystemError):
    operation = OperationKind.DELETE_DIRECTORY

    @classmethod
    def at_location(cls, location: str, reason: str = "") -> DeleteDirectoryFailed:
        return cls(
            _with_reason(f"Unable to delete directory located at: {location}", reason),
            location,
            reason,
        )


class CreateDirectoryFailed(FilesystemError):
    operation = OperationKind.CREATE_DIRECTORY

    @classmethod
    def at_location(cls, location: str, reason: str = "") -> CreateDirectoryFailed:
        return cls(
            _with_reason(f"Unable to create a directory at {location}", reason),
            location,
            reason,
        )


class _TransferFailed(FilesystemError):
    """A failure involving a source and a destination."""

    verb = ""

    def __init__(self, message: str, source: str, destination: str, reason: str = ""):
        super().__init__(message, source, reason)
        self.source = source
        self.destination = destination

    @property
    def paths(self) -> tuple[str, ...]:
        return (self.source, self.destination)

    @classmethod
    def from_location_to(cls, source: str, destination: str, reason: str = ""):
        message = _with_reason(
            f"Unable to {cls.verb} file from {source} to {destination}", reason
        )
        return cls(message, source, destination, reason)


class MoveFailed(_TransferFailed):
    operation = OperationKind.MOVE
    verb = "move"


class CopyFailed(_TransferFailed):
    operation = OperationKind.COPY
    verb = "copy"


class MetadataUnavailable(FilesystemError):
    """The requested metadata could not be retrieved."""

    operation = OperationKind.RETRIEVE_METADATA

    def __init__(self, message: str, location: str, metadata_type: str, reason: str = ""):
        super().__init__(message, location, reason)
        self.metadata_type = metadata_type

    @classmethod
    def create(
        cls, location: str, metadata_type: str, reason: str = ""
    ) -> MetadataUnavailable:
        message = _with_reason(
            f"Unable to retrieve the {metadata_type} for file at location: {location}",
            reason,
        )
        return cls(message, location, metadata_type, reason)

    @classmethod
    def file_size(cls, location: str, reason: str = "") -> MetadataUnavailable:
        return cls.create(location, ATTRIBUTE_FILE_SIZE, reason)

    @classmethod
    def mime_type(cls, location: str, reason: str = "") -> MetadataUnavailable:
        return cls.create(location, ATTRIBUTE_MIME_TYPE, reason)

    @classmethod
    def last_modified(cls, location: str, reason: str = "") -> MetadataUnavailable:
        return cls.create(location, ATTRIBUTE_LAST_MODIFIED, reason)

    @classmethod
    def visibility(cls, location: str, reason: str = "") -> MetadataUnavailable:
        return cls.create(location, ATTRIBUTE_VISIBILITY, reason)


class SetVisibilityUnsupported(FilesystemError):
    operation = OperationKind.SET_VISIBILITY

    @classmethod
    def at_location(cls, location: str, reason: str = "") -> SetVisibilityUnsupported:
        reason = reason or "WebDAV does not support visibility"
        return cls(
            _with_reason(f"Unable to set visibility for file {location}", reason),
            location,
            reason,
        )


class ExistenceCheckFailed(FilesystemError):
    operation = OperationKind.CHECK_EXISTENCE

    @classmethod
    def for_location(cls, location: str, reason: str = "") -> ExistenceCheckFailed:
        return cls(
            _with_reason(f"Unable to check existence for: {location}", reason),
            location,
            reason,
        )


class InvalidServerResponse(FilesystemError):
    """The server answered a property query with something unusable."""

    operation = OperationKind.PROPFIND

    def __init__(self, message: str, location: str, method: str, reason: str = ""):
        super().__init__(message, location, reason)
        self.method = method

    @classmethod
    def propfind(cls, location: str, reason: str = "") -> InvalidServerResponse:
        message = _with_reason(
            f"Invalid response from webdav server for propFind request to: {location}",
            reason,
        )
        return cls(message, location, "propfind", reason)
