"""A filesystem abstraction over a remote WebDAV server."""

from .adapter import FilesystemAdapter, WebDAVFilesystem
from .attributes import DirectoryAttributes, FileAttributes, StorageAttributes, Visibility
from .config import WebDAVConfig, create_client, create_filesystem
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
    OperationKind,
    ReadFailed,
    SetVisibilityUnsupported,
    WriteFailed,
)
from .internal import Client
from .prefixer import PathPrefixer

__version__ = "0.1.0"

__all__ = [
    "Client",
    "FilesystemAdapter",
    "WebDAVFilesystem",
    "WebDAVConfig",
    "create_client",
    "create_filesystem",
    "PathPrefixer",
    "DirectoryAttributes",
    "FileAttributes",
    "StorageAttributes",
    "Visibility",
    "FilesystemError",
    "OperationKind",
    "WriteFailed",
    "ReadFailed",
    "DeleteFileFailed",
    "DeleteDirectoryFailed",
    "CreateDirectoryFailed",
    "MoveFailed",
    "CopyFailed",
    "MetadataUnavailable",
    "SetVisibilityUnsupported",
    "ExistenceCheckFailed",
    "InvalidServerResponse",
]
