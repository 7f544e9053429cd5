"""Filesystem adapter backed by a WebDAV server."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator
from typing import BinaryIO, Protocol

import httpx

from .attributes import (
    ATTRIBUTE_FILE_SIZE,
    ATTRIBUTE_LAST_MODIFIED,
    ATTRIBUTE_MIME_TYPE,
    DirectoryAttributes,
    FileAttributes,
    StorageAttributes,
    Visibility,
)
from .debug import logger
from .errors import (
    CopyFailed,
    CreateDirectoryFailed,
    DeleteDirectoryFailed,
    DeleteFileFailed,
    ExistenceCheckFailed,
    FilesystemError,
    InvalidServerResponse,
    MetadataUnavailable,
    MoveFailed,
    ReadFailed,
    SetVisibilityUnsupported,
    WriteFailed,
)
from .internal import Client, ClientError, Depth, ResponseStream, format_overwrite
from .prefixer import PathPrefixer
from .properties import PROPERTIES, is_directory, parse_item

STREAM_CHUNK_SIZE = 65536


class FilesystemAdapter(Protocol):
    """Storage-agnostic filesystem interface.

    All paths are logical paths relative to the adapter's root. Failures are
    raised as ``FilesystemError`` subclasses.
    """

    def file_exists(self, path: str) -> bool:
        """Check if a file or directory exists."""
        ...

    def write(self, path: str, contents: bytes | str) -> None:
        """Write contents to a file, creating its parent directory."""
        ...

    def write_stream(self, path: str, contents: BinaryIO) -> None:
        """Write a stream to a file, creating its parent directory."""
        ...

    def read(self, path: str) -> bytes:
        """Read a whole file."""
        ...

    def read_stream(self, path: str) -> BinaryIO:
        """Open a file for streamed reading. The caller closes the stream."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file. Deleting a missing file succeeds."""
        ...

    def delete_directory(self, path: str) -> None:
        """Delete a directory and its contents. Missing directories are ignored."""
        ...

    def create_directory(self, path: str) -> None:
        """Create a directory unless it already exists."""
        ...

    def set_visibility(self, path: str, visibility: str) -> None:
        """Change the visibility of a file."""
        ...

    def visibility(self, path: str) -> FileAttributes:
        """Get the visibility of a file."""
        ...

    def mime_type(self, path: str) -> FileAttributes:
        """Get the mime type of a file."""
        ...

    def last_modified(self, path: str) -> FileAttributes:
        """Get the last modification time of a file."""
        ...

    def file_size(self, path: str) -> FileAttributes:
        """Get the size of a file."""
        ...

    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """List the entries of a directory, recursively if ``deep``."""
        ...

    def move(self, source: str, destination: str) -> None:
        """Move a file."""
        ...

    def copy(self, source: str, destination: str) -> None:
        """Copy a file."""
        ...


def _reason(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


class FileStream(ResponseStream):
    """Body of a file opened with ``read_stream``.

    Transport failures while reading surface as ``ReadFailed``.
    """

    def __init__(self, response: httpx.Response, path: str):
        super().__init__(response, STREAM_CHUNK_SIZE)
        self.path = path

    def readinto(self, b) -> int:
        try:
            return super().readinto(b)
        except ClientError as e:
            logger.warning(f"Reading {self.path} failed: {e}")
            raise ReadFailed.from_location(self.path, str(e)) from e



class WebDAVFilesystem:
    """``FilesystemAdapter`` translating each operation into WebDAV requests.

    The adapter holds no mutable state: a transport client, a path prefixer
    and the fixed set of properties asked for on every PROPFIND.
    """

    properties: tuple[str, ...] = PROPERTIES

    def __init__(self, client: Client, prefix: str = "/"):
        """Initialize the adapter.

        Args:
            client: WebDAV transport client, already configured with the
                server endpoint and credentials
            prefix: Root of the filesystem on the server
        """
        self.client = client
        self.prefixer = PathPrefixer(prefix)

    def file_exists(self, path: str) -> bool:
        """Check if a file or directory exists.

        Args:
            path: Logical path

        Returns:
            True if the server answers HEAD with 200

        Raises:
            ExistenceCheckFailed: If the server could not be reached
        """
        try:
            response = self.client.request("HEAD", self.prefixer.prefix_path(path))
        except ClientError as e:
            raise ExistenceCheckFailed.for_location(path, str(e)) from e

        return response.status_code == 200

    def write(self, path: str, contents: bytes | str) -> None:
        self._write_object(path, contents)

    def write_stream(self, path: str, contents: BinaryIO) -> None:
        self._write_object(path, _iter_chunks(contents))

    def read(self, path: str) -> bytes:
        """Read a whole file.

        Raises:
            ReadFailed: If the server does not answer 200 or cannot be reached
        """
        try:
            response = self.client.request("GET", self.prefixer.prefix_path(path))
        except ClientError as e:
            logger.warning(f"GET {path} failed: {e}")
            raise ReadFailed.from_location(path, str(e)) from e

        if response.status_code != 200:
            raise ReadFailed.from_location(path, _reason(response))

        return response.content

    def read_stream(self, path: str) -> BinaryIO:
        """Open a file for streamed reading.

        Returns:
            A readable binary stream; the caller must close it

        Raises:
            ReadFailed: If the server does not answer 200 or cannot be reached.
                Reading from the stream raises it too when the connection
                drops mid-body.
        """
        try:
            response = self.client.open_stream("GET", self.prefixer.prefix_path(path))
        except ClientError as e:
            logger.warning(f"GET {path} failed: {e}")
            raise ReadFailed.from_location(path, str(e)) from e

        if response.status_code != 200:
            response.close()
            raise ReadFailed.from_location(path, _reason(response))

        return FileStream(response, path)  # type: ignore[return-value]

    def delete(self, path: str) -> None:
        self._delete(path, DeleteFileFailed)

    def delete_directory(self, path: str) -> None:
        self._delete(path, DeleteDirectoryFailed)

    def create_directory(self, path: str) -> None:
        """Create a directory unless it already exists.

        Only the directory itself is created; its parent must exist.

        Raises:
            CreateDirectoryFailed: If the server does not answer MKCOL with 201
        """
        try:
            if self.file_exists(path):
                return
        except ExistenceCheckFailed as e:
            raise CreateDirectoryFailed.at_location(path, e.reason) from e

        logger.debug(f"Creating directory {path}")
        try:
            response = self.client.request(
                "MKCOL", self.prefixer.prefix_directory_path(path)
            )
        except ClientError as e:
            raise CreateDirectoryFailed.at_location(path, str(e)) from e

        if response.status_code != 201:
            raise CreateDirectoryFailed.at_location(path, _reason(response))

    def set_visibility(self, path: str, visibility: str) -> None:
        raise SetVisibilityUnsupported.at_location(path)

    def visibility(self, path: str) -> FileAttributes:
        """Every existing resource is public.

        Raises:
            MetadataUnavailable: If the path does not exist
        """
        try:
            exists = self.file_exists(path)
        except ExistenceCheckFailed as e:
            raise MetadataUnavailable.visibility(path, e.reason) from e

        if not exists:
            raise MetadataUnavailable.visibility(path)

        return FileAttributes(path, visibility=Visibility.PUBLIC)

    def mime_type(self, path: str) -> FileAttributes:
        return self.fetch_metadata(path, ATTRIBUTE_MIME_TYPE)

    def last_modified(self, path: str) -> FileAttributes:
        return self.fetch_metadata(path, ATTRIBUTE_LAST_MODIFIED)

    def file_size(self, path: str) -> FileAttributes:
        return self.fetch_metadata(path, ATTRIBUTE_FILE_SIZE)

    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """List the entries of a directory.

        Entries are produced lazily in the order the server lists them. With
        ``deep``, the contents of a subdirectory are yielded before the
        subdirectory itself and before its next sibling.

        Args:
            path: Logical path of the directory
            deep: Whether to descend into subdirectories

        Yields:
            FileAttributes or DirectoryAttributes with logical paths

        Raises:
            InvalidServerResponse: If any PROPFIND of the traversal fails;
                entries already yielded stay yielded
        """
        for item_path, item in self._propfind_children(path):
            if is_directory(item):
                if deep:
                    yield from self.list_contents(item_path, deep)
                yield DirectoryAttributes(item_path)
            else:
                yield parse_item(item_path, item)

    def move(self, source: str, destination: str) -> None:
        self._transfer("MOVE", source, destination, MoveFailed)

    def copy(self, source: str, destination: str) -> None:
        self._transfer("COPY", source, destination, CopyFailed)

    def fetch_metadata(self, path: str, metadata_type: str) -> FileAttributes:
        """Fetch metadata of a single resource with a depth 0 PROPFIND.

        Args:
            path: Logical path
            metadata_type: The attribute the caller is after

        Returns:
            FileAttributes parsed from the resource's properties

        Raises:
            MetadataUnavailable: If the query fails, or if the file size of a
                directory is requested
        """
        location = self.prefixer.prefix_path(path)

        try:
            entry = self.client.propfind_flat(location, self.properties)
        except ClientError as e:
            raise MetadataUnavailable.create(path, metadata_type, str(e)) from e

        if metadata_type == ATTRIBUTE_FILE_SIZE and is_directory(entry):
            raise MetadataUnavailable.create(path, metadata_type, "path is a directory")

        return parse_item(path, entry)

    def _write_object(self, path: str, body: bytes | str | Iterable[bytes]) -> None:
        parent = posixpath.dirname(self.prefixer.normalize(path))
        if parent:
            try:
                self.create_directory(parent)
            except FilesystemError as e:
                raise WriteFailed.at_location(path, str(e)) from e

        logger.debug(f"Writing {path}")
        try:
            response = self.client.request(
                "PUT", self.prefixer.prefix_path(path), content=body
            )
        except ClientError as e:
            logger.warning(f"PUT {path} failed: {e}")
            raise WriteFailed.at_location(path, str(e)) from e

        if response.status_code != 201:
            raise WriteFailed.at_location(path, _reason(response))

    def _delete(self, path: str, failure: type[DeleteFileFailed | DeleteDirectoryFailed]) -> None:
        logger.debug(f"Deleting {path}")
        try:
            response = self.client.request("DELETE", self.prefixer.prefix_path(path))
        except ClientError as e:
            raise failure.at_location(path, str(e)) from e

        if response.status_code not in (204, 404):
            raise failure.at_location(path, response.text or _reason(response))

    def _transfer(
        self,
        method: str,
        source: str,
        destination: str,
        failure: type[MoveFailed | CopyFailed],
    ) -> None:
        source_path = self.prefixer.prefix_path(source)
        destination_path = self.prefixer.prefix_path(destination)
        headers = {
            "Destination": self.client.resolve_href(destination_path),
            "Overwrite": format_overwrite(True),
        }

        logger.debug(f"{method} {source} -> {destination}")
        try:
            response = self.client.request(method, source_path, headers=headers)
        except ClientError as e:
            raise failure.from_location_to(source, destination, str(e)) from e

        if response.status_code not in (201, 204):
            raise failure.from_location_to(source, destination, _reason(response))

    def _propfind_children(self, path: str) -> list[tuple[str, dict]]:
        """Depth 1 PROPFIND, without the entry of the queried collection."""
        location = self.prefixer.prefix_directory_path(path)

        try:
            response = self.client.propfind(location, self.properties, Depth.ONE)
        except ClientError as e:
            logger.warning(f"PROPFIND {path} failed: {e}")
            raise InvalidServerResponse.propfind(path, str(e)) from e

        # The first entry describes the collection itself
        entries = list(response.items())[1:]
        return [
            (self.prefixer.strip_prefix(server_path), item)
            for server_path, item in entries
        ]


def _iter_chunks(stream: BinaryIO) -> Iterator[bytes]:
    while True:
        chunk = stream.read(STREAM_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk
