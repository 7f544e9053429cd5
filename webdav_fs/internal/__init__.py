"""Internal WebDAV transport client."""

from .client import Client, ResponseStream
from .internal import (
    ClientError,
    Depth,
    HrefError,
    HTTPError,
    MalformedResponse,
    TransportError,
    depth_to_string,
    format_overwrite,
)

__all__ = [
    "Client",
    "ResponseStream",
    "ClientError",
    "Depth",
    "HrefError",
    "HTTPError",
    "MalformedResponse",
    "TransportError",
    "depth_to_string",
    "format_overwrite",
]
