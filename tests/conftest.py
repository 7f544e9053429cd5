"""Shared fixtures: an in-memory WebDAV server mounted on httpx.MockTransport."""

from __future__ import annotations

import mimetypes
import posixpath
from urllib.parse import quote, unquote, urlparse

import httpx
import pytest
from lxml import etree

from webdav_fs import WebDAVFilesystem
from webdav_fs.internal import Client

ENDPOINT = "http://dav.test/remote.php/dav/"
BASE_PATH = "/remote.php/dav/"
LAST_MODIFIED = "Tue, 15 Nov 1994 12:45:26 GMT"

D = "{DAV:}"


class FakeDAVServer:
    """Minimal WebDAV server keeping its tree in a dict.

    Keys are slash-separated paths without leading or trailing slashes; the
    root is ``""``. A value of ``None`` marks a collection.

    ``collection_signal`` selects how collections are flagged in PROPFIND
    answers: ``"resourcetype"``, ``"contenttype"`` or ``"iscollection"``.
    """

    def __init__(self, collection_signal: str = "resourcetype"):
        self.tree: dict[str, bytes | None] = {"": None}
        self.requests: list[tuple[str, str]] = []
        self.statuses: dict[tuple[str, str], int] = {}
        self.broken: set[tuple[str, str]] = set()
        self.collection_signal = collection_signal

    # Helpers for arranging tests

    def add_dir(self, path: str) -> None:
        self.tree[path.strip("/")] = None

    def add_file(self, path: str, content: bytes = b"") -> None:
        self.tree[path.strip("/")] = content

    def fail(self, method: str, path: str, status: int) -> None:
        """Answer ``method`` on ``path`` with ``status`` instead of handling it."""
        self.statuses[(method, path.strip("/"))] = status

    def break_connection(self, method: str, path: str) -> None:
        """Raise a transport error for ``method`` on ``path``."""
        self.broken.add((method, path.strip("/")))

    def calls(self, method: str) -> list[str]:
        return [path for m, path in self.requests if m == method]

    # Request handling

    def _key(self, path: str) -> str:
        """Tree key of an already decoded URL path."""
        assert path.startswith(BASE_PATH.rstrip("/")), path
        return path[len(BASE_PATH):].strip("/") if len(path) > len(BASE_PATH) else ""

    def _parent_is_dir(self, key: str) -> bool:
        parent = posixpath.dirname(key)
        return parent in self.tree and self.tree[parent] is None

    def _children(self, key: str) -> list[str]:
        prefix = f"{key}/" if key else ""
        return sorted(
            k for k in self.tree
            if k and k.startswith(prefix) and "/" not in k[len(prefix):]
        )

    def _subtree(self, key: str) -> list[str]:
        return [k for k in self.tree if k == key or k.startswith(f"{key}/")]

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        key = self._key(request.url.path)
        self.requests.append((method, key))

        if (method, key) in self.broken:
            raise httpx.ConnectError("connection refused", request=request)
        if (method, key) in self.statuses:
            return httpx.Response(self.statuses[(method, key)], text="forced failure")

        handler = getattr(self, f"do_{method.lower()}")
        return handler(request, key)

    def do_head(self, request: httpx.Request, key: str) -> httpx.Response:
        return httpx.Response(200 if key in self.tree else 404)

    def do_get(self, request: httpx.Request, key: str) -> httpx.Response:
        if key not in self.tree:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, content=self.tree[key] or b"")

    def do_put(self, request: httpx.Request, key: str) -> httpx.Response:
        if not self._parent_is_dir(key):
            return httpx.Response(409, text="parent collection missing")
        self.tree[key] = request.read()
        return httpx.Response(201)

    def do_delete(self, request: httpx.Request, key: str) -> httpx.Response:
        if key not in self.tree:
            return httpx.Response(404)
        for k in self._subtree(key):
            del self.tree[k]
        return httpx.Response(204)

    def do_mkcol(self, request: httpx.Request, key: str) -> httpx.Response:
        if key in self.tree:
            return httpx.Response(405)
        if not self._parent_is_dir(key):
            return httpx.Response(409)
        self.tree[key] = None
        return httpx.Response(201)

    def _transfer(self, request: httpx.Request, key: str, keep_source: bool) -> httpx.Response:
        if key not in self.tree:
            return httpx.Response(404)
        destination = self._key(unquote(urlparse(request.headers["Destination"]).path))
        if not self._parent_is_dir(destination):
            return httpx.Response(409)
        existed = destination in self.tree
        for k in self._subtree(key):
            self.tree[destination + k[len(key):]] = self.tree[k]
            if not keep_source:
                del self.tree[k]
        return httpx.Response(204 if existed else 201)

    def do_move(self, request: httpx.Request, key: str) -> httpx.Response:
        return self._transfer(request, key, keep_source=False)

    def do_copy(self, request: httpx.Request, key: str) -> httpx.Response:
        return self._transfer(request, key, keep_source=True)

    def do_propfind(self, request: httpx.Request, key: str) -> httpx.Response:
        if key not in self.tree:
            return httpx.Response(404)

        keys = [key]
        if request.headers.get("Depth") == "1" and self.tree[key] is None:
            keys += self._children(key)

        root = etree.Element(f"{D}multistatus", nsmap={"d": "DAV:"})
        for k in keys:
            root.append(self._response_element(k))

        body = etree.tostring(root, xml_declaration=True, encoding="utf-8")
        return httpx.Response(
            207, content=body, headers={"Content-Type": "application/xml; charset=utf-8"}
        )

    def _response_element(self, key: str) -> etree._Element:
        is_dir = self.tree[key] is None
        response = etree.Element(f"{D}response")
        href = BASE_PATH + quote(key) + ("/" if is_dir and key else "")
        etree.SubElement(response, f"{D}href").text = href

        propstat = etree.SubElement(response, f"{D}propstat")
        prop = etree.SubElement(propstat, f"{D}prop")
        etree.SubElement(prop, f"{D}displayname").text = posixpath.basename(key)
        etree.SubElement(prop, f"{D}getlastmodified").text = LAST_MODIFIED
        resource_type = etree.SubElement(prop, f"{D}resourcetype")
        missing: list[str] = []

        if is_dir:
            if self.collection_signal == "resourcetype":
                etree.SubElement(resource_type, f"{D}collection")
            elif self.collection_signal == "contenttype":
                etree.SubElement(prop, f"{D}getcontenttype").text = "httpd/unix-directory"
            elif self.collection_signal == "iscollection":
                etree.SubElement(prop, f"{D}iscollection").text = "1"
            missing.append("getcontentlength")
        else:
            content = self.tree[key] or b""
            mime_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
            etree.SubElement(prop, f"{D}getcontentlength").text = str(len(content))
            etree.SubElement(prop, f"{D}getcontenttype").text = mime_type
            missing.append("iscollection")

        etree.SubElement(propstat, f"{D}status").text = "HTTP/1.1 200 OK"

        not_found = etree.SubElement(response, f"{D}propstat")
        not_found_prop = etree.SubElement(not_found, f"{D}prop")
        for name in missing:
            etree.SubElement(not_found_prop, f"{D}{name}")
        etree.SubElement(not_found, f"{D}status").text = "HTTP/1.1 404 Not Found"
        return response


@pytest.fixture
def server() -> FakeDAVServer:
    return FakeDAVServer()


@pytest.fixture
def client(server: FakeDAVServer) -> Client:
    http_client = httpx.Client(transport=httpx.MockTransport(server.handle))
    with Client(http_client, ENDPOINT) as c:
        yield c


@pytest.fixture
def adapter(client: Client) -> WebDAVFilesystem:
    return WebDAVFilesystem(client)
