"""Internal client utilities for WebDAV."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from typing import Any
from urllib.parse import quote, unquote, urljoin, urlparse

import httpx
from lxml import etree

from .elements import RESOURCE_TYPE, MultiStatus, Prop, PropFind, ResourceType
from .internal import (
    Depth,
    HTTPError,
    MalformedResponse,
    TransportError,
    depth_to_string,
)

Body = bytes | str | Iterable[bytes] | None


class ResponseStream(io.RawIOBase):
    """Read-only binary file object over a streamed HTTP response.

    Closing the stream closes the underlying response. A connection lost
    while reading the body raises ``TransportError``.
    """

    def __init__(self, response: httpx.Response, chunk_size: int = 65536):
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes(chunk_size)
        self._buffer = b""

    @property
    def response(self) -> httpx.Response:
        return self._response

    def readable(self) -> bool:
        return True

    def readinto(self, b: Any) -> int:
        if not self._buffer:
            try:
                self._buffer = next(self._chunks, b"")
            except httpx.HTTPError as e:
                request = self._response.request
                raise TransportError(request.method, str(request.url), e) from e
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class Client:
    """WebDAV HTTP client."""

    def __init__(self, http_client: httpx.Client | None = None, endpoint: str = ""):
        """Initialize client.

        Args:
            http_client: HTTP client to use (creates default if None)
            endpoint: Base endpoint URL
        """
        self.http_client = http_client or httpx.Client()
        self.endpoint = urlparse(endpoint)

        # Ensure path ends with /
        path = self.endpoint.path
        if not path.endswith("/"):
            self.endpoint = self.endpoint._replace(path=path + "/")

    def resolve_href(self, path: str) -> str:
        """Resolve a path relative to the endpoint.

        Server paths are always resolved below the endpoint path, so ``/a/b``
        against ``https://host/dav/`` gives ``https://host/dav/a/b``. The path
        is percent-encoded first; ``#``, ``?`` and ``:`` are part of the name.

        Args:
            path: Path to resolve

        Returns:
            Full URL
        """
        return urljoin(self.endpoint.geturl(), quote(path.lstrip("/"), safe="/"))

    def relative_path(self, href: str) -> str:
        """Turn an href returned by the server into a path below the endpoint.

        Args:
            href: Absolute URL or absolute path, possibly percent-encoded

        Returns:
            Decoded path starting with ``/``
        """
        path = unquote(urlparse(href).path)
        base = unquote(self.endpoint.path)
        if path.startswith(base):
            path = path[len(base):]
        elif path + "/" == base:
            path = ""
        return "/" + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        content: Body = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make an HTTP request.

        The response is returned whatever its status code; callers interpret it.

        Args:
            method: HTTP method
            path: Request path
            content: Request body
            headers: Request headers

        Returns:
            HTTP response

        Raises:
            TransportError: If no response could be obtained
        """
        url = self.resolve_href(path)
        try:
            return self.http_client.request(
                method, url, content=content, headers=headers or {}
            )
        except httpx.HTTPError as e:
            raise TransportError(method, url, e) from e

    def open_stream(
        self, method: str, path: str, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        """Make an HTTP request whose body is streamed.

        The caller owns the response and must close it.

        Raises:
            TransportError: If no response could be obtained
        """
        url = self.resolve_href(path)
        request = self.http_client.build_request(method, url, headers=headers or {})
        try:
            return self.http_client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(method, url, e) from e

    def xml_request(
        self,
        method: str,
        path: str,
        xml_obj: etree._Element,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make an XML HTTP request.

        Args:
            method: HTTP method
            path: Request path
            xml_obj: XML object to send
            headers: Additional request headers

        Returns:
            HTTP response
        """
        # Serialize to bytes directly with XML declaration
        xml_bytes = etree.tostring(
            xml_obj, encoding="utf-8", xml_declaration=True, pretty_print=False
        )

        req_headers = dict(headers or {})
        req_headers["Content-Type"] = "application/xml; charset=utf-8"

        return self.request(method, path, content=xml_bytes, headers=req_headers)

    def propfind(
        self,
        path: str,
        properties: Iterable[str],
        depth: Depth = Depth.ZERO,
    ) -> dict[str, dict[str, Any]]:
        """Perform a PROPFIND request.

        Args:
            path: Resource path
            properties: Clark-notation names of the properties to fetch
            depth: Depth header value

        Returns:
            Mapping of server path (relative to the endpoint) to a mapping of
            property name to value, in the order the server listed them.
            ``{DAV:}resourcetype`` is returned as a ``ResourceType``, every
            other property as its text content (``None`` when empty).

        Raises:
            HTTPError: If the server does not answer 207 Multi-Status
            MalformedResponse: If the multistatus body cannot be parsed
            TransportError: If no response could be obtained
        """
        propfind = PropFind(prop=Prop.from_names(tuple(properties)))
        headers = {"Depth": depth_to_string(depth)}

        resp = self.xml_request("PROPFIND", path, propfind.to_xml(), headers=headers)

        if resp.status_code != 207:
            text = resp.text[:1024].strip()
            raise HTTPError(resp.status_code, Exception(text) if text else None)

        try:
            ms = MultiStatus.from_xml(etree.fromstring(resp.content))
        except (etree.XMLSyntaxError, ValueError) as e:
            raise MalformedResponse(f"webdav: invalid multistatus body: {e}") from e

        result: dict[str, dict[str, Any]] = {}
        for response in ms.responses:
            try:
                href = response.path()
            except ValueError as e:
                raise MalformedResponse(str(e)) from e

            values: dict[str, Any] = {}
            for tag, elem in response.properties().items():
                if tag == RESOURCE_TYPE:
                    values[tag] = ResourceType.from_xml(elem)
                else:
                    values[tag] = elem.text
            result[self.relative_path(href)] = values

        return result

    def propfind_flat(self, path: str, properties: Iterable[str]) -> dict[str, Any]:
        """Perform a PROPFIND request with depth 0.

        Args:
            path: Resource path
            properties: Properties to fetch

        Returns:
            Property mapping of the resource itself
        """
        responses = self.propfind(path, properties, Depth.ZERO)

        if not responses:
            raise MalformedResponse("webdav: PROPFIND with Depth: 0 returned no responses")

        return next(iter(responses.values()))

    def close(self) -> None:
        """Close the HTTP client."""
        self.http_client.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
