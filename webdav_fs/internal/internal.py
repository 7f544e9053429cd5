"""Internal types shared by the WebDAV transport client."""

from __future__ import annotations

from enum import IntEnum
from http import HTTPStatus


class Depth(IntEnum):
    """Depth indicates whether a request applies to the resource's members.

    Defined in RFC 4918 section 10.2.
    """

    ZERO = 0  # Request applies only to the resource
    ONE = 1  # Request applies to resource and its internal members only
    INFINITY = -1  # Request applies to resource and all of its members


def depth_to_string(d: Depth) -> str:
    """Format the depth."""
    if d == Depth.ZERO:
        return "0"
    elif d == Depth.ONE:
        return "1"
    elif d == Depth.INFINITY:
        return "infinity"
    else:
        raise ValueError("webdav: invalid Depth value")


def format_overwrite(overwrite: bool) -> str:
    """Format an Overwrite header."""
    return "T" if overwrite else "F"


class ClientError(Exception):
    """Base class for every error raised by the transport client."""


class HTTPError(ClientError):
    """HTTP error with status code."""

    def __init__(self, code: int, err: Exception | None = None):
        self.code = code
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        try:
            text = HTTPStatus(self.code).phrase
        except ValueError:
            text = "Unknown"

        s = f"{self.code} {text}"
        if self.err:
            return f"{s}: {self.err}"
        return s


class TransportError(ClientError):
    """The request never produced an HTTP response (connection, TLS, timeout...)."""

    def __init__(self, method: str, url: str, err: Exception):
        self.method = method
        self.url = url
        self.err = err
        super().__init__(f"webdav: {method} {url} failed: {err}")


class MalformedResponse(ClientError):
    """The server answered with a body that is not a valid multistatus document."""


class HrefError(ClientError):
    """Error associated with a specific href."""

    def __init__(self, href: str, err: Exception):
        self.href = href
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.href}: {self.err}"

