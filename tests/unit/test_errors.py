"""Tests for the failure taxonomy."""

import pytest

from webdav_fs.attributes import (
    ATTRIBUTE_FILE_SIZE,
    ATTRIBUTE_LAST_MODIFIED,
    ATTRIBUTE_MIME_TYPE,
    ATTRIBUTE_VISIBILITY,
)
from webdav_fs.errors import (
    CopyFailed,
    CreateDirectoryFailed,
    DeleteDirectoryFailed,
    DeleteFileFailed,
    FilesystemError,
    InvalidServerResponse,
    MetadataUnavailable,
    MoveFailed,
    OperationKind,
    ReadFailed,
    SetVisibilityUnsupported,
    WriteFailed,
)


@pytest.mark.parametrize(
    "error, operation",
    [
        (WriteFailed.at_location("a.txt"), OperationKind.WRITE),
        (ReadFailed.from_location("a.txt"), OperationKind.READ),
        (DeleteFileFailed.at_location("a.txt"), OperationKind.DELETE_FILE),
        (DeleteDirectoryFailed.at_location("a"), OperationKind.DELETE_DIRECTORY),
        (CreateDirectoryFailed.at_location("a"), OperationKind.CREATE_DIRECTORY),
        (MoveFailed.from_location_to("a", "b"), OperationKind.MOVE),
        (CopyFailed.from_location_to("a", "b"), OperationKind.COPY),
        (MetadataUnavailable.file_size("a"), OperationKind.RETRIEVE_METADATA),
        (SetVisibilityUnsupported.at_location("a"), OperationKind.SET_VISIBILITY),
        (InvalidServerResponse.propfind("a"), OperationKind.PROPFIND),
    ],
)
def test_every_failure_is_tagged(error, operation):
    """Test that each failure carries its operation kind."""
    assert isinstance(error, FilesystemError)
    assert error.operation == operation


def test_write_failed_message_includes_reason():
    """Test the message, location and reason of a write failure."""
    error = WriteFailed.at_location("a/b.txt", "409 Conflict")

    assert str(error) == "Unable to write file at location: a/b.txt. 409 Conflict"
    assert error.location == "a/b.txt"
    assert error.reason == "409 Conflict"
    assert error.paths == ("a/b.txt",)


def test_transfer_failures_carry_both_paths():
    """Test that move and copy failures name source and destination."""
    error = MoveFailed.from_location_to("old.txt", "new.txt")

    assert str(error) == "Unable to move file from old.txt to new.txt"
    assert error.source == "old.txt"
    assert error.destination == "new.txt"
    assert error.paths == ("old.txt", "new.txt")

    assert str(CopyFailed.from_location_to("a", "b")).startswith("Unable to copy file")


def test_metadata_unavailable_names_the_attribute():
    """Test that metadata failures name the requested attribute."""
    error = MetadataUnavailable.create("dir", "file_size", "path is a directory")

    assert error.metadata_type == "file_size"
    assert "Unable to retrieve the file_size for file at location: dir" in str(error)


def test_invalid_server_response_for_propfind():
    """Test the message of a failed PROPFIND."""
    error = InvalidServerResponse.propfind("dir", "500 Internal Server Error")

    assert error.method == "propfind"
    assert str(error) == (
        "Invalid response from webdav server for propFind request to: dir. "
        "500 Internal Server Error"
    )


def test_cause_is_chained():
    """Test that the underlying error is kept as the cause."""
    cause = ConnectionError("boom")

    with pytest.raises(ReadFailed) as exc_info:
        try:
            raise cause
        except ConnectionError as e:
            raise ReadFailed.from_location("a.txt", str(e)) from e

    assert exc_info.value.__cause__ is cause


@pytest.mark.parametrize(
    "factory, metadata_type",
    [
        (MetadataUnavailable.file_size, ATTRIBUTE_FILE_SIZE),
        (MetadataUnavailable.mime_type, ATTRIBUTE_MIME_TYPE),
        (MetadataUnavailable.last_modified, ATTRIBUTE_LAST_MODIFIED),
        (MetadataUnavailable.visibility, ATTRIBUTE_VISIBILITY),
    ],
)
def test_metadata_shortcuts_use_attribute_names(factory, metadata_type):
    """Test that each metadata shortcut is tagged with its attribute name."""
    error = factory("a.txt")

    assert error.metadata_type == metadata_type
    assert f"the {metadata_type} for file" in str(error)
