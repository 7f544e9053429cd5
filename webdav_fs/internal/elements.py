"""WebDAV XML elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import ParseResult as URL, urlparse

from lxml import etree

from .internal import HrefError, HTTPError

# WebDAV namespace
NAMESPACE = "DAV:"

# Common XML names
RESOURCE_TYPE = "{DAV:}resourcetype"
DISPLAY_NAME = "{DAV:}displayname"
GET_CONTENT_LENGTH = "{DAV:}getcontentlength"
GET_CONTENT_TYPE = "{DAV:}getcontenttype"
GET_LAST_MODIFIED = "{DAV:}getlastmodified"
IS_COLLECTION = "{DAV:}iscollection"
COLLECTION = "{DAV:}collection"


@dataclass
class Status:
    """HTTP status for WebDAV responses."""

    code: int
    text: str = ""

    @staticmethod
    def from_string(s: str) -> Status:
        """Unmarshal status from text."""
        if not s:
            return Status(code=0)

        parts = s.strip().split(" ", 2)
        if len(parts) < 2:
            raise ValueError(f"webdav: invalid HTTP status {s!r}: expected 3 fields")

        try:
            code = int(parts[1])
        except ValueError as e:
            raise ValueError(
                f"webdav: invalid HTTP status {s!r}: failed to parse code: {e}"
            ) from e

        return Status(code=code, text=parts[2] if len(parts) == 3 else "")

    def ok(self) -> bool:
        """Whether the status is a 2xx one."""
        return self.code // 100 == 2


@dataclass
class Href:
    """WebDAV href element."""

    url: URL

    def __str__(self) -> str:
        return self.url.geturl()

    @staticmethod
    def from_string(s: str) -> Href:
        """Parse href from string."""
        return Href(url=urlparse(s.strip()))


@dataclass
class Prop:
    """WebDAV prop element."""

    raw: list[etree._Element] = field(default_factory=list)

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        prop = etree.Element(f"{{{NAMESPACE}}}prop")
        for elem in self.raw:
            prop.append(elem)
        return prop

    @staticmethod
    def from_xml(element: etree._Element) -> Prop:
        """Parse from XML element."""
        return Prop(raw=[child for child in element if isinstance(child.tag, str)])

    @staticmethod
    def from_names(names: list[str] | tuple[str, ...]) -> Prop:
        """Build an empty-valued prop listing, as sent in a PROPFIND body."""
        return Prop(raw=[etree.Element(name) for name in names])


@dataclass
class PropStat:
    """WebDAV propstat element."""

    prop: Prop
    status: Status
    response_description: str = ""

    @staticmethod
    def from_xml(element: etree._Element) -> PropStat:
        """Parse from XML element."""
        prop_el = element.find(f"{{{NAMESPACE}}}prop")
        prop = Prop.from_xml(prop_el) if prop_el is not None else Prop()

        status_el = element.find(f"{{{NAMESPACE}}}status")
        status_text = status_el.text if status_el is not None else ""
        status = Status.from_string(status_text or "")

        desc_el = element.find(f"{{{NAMESPACE}}}responsedescription")
        desc = desc_el.text if desc_el is not None and desc_el.text else ""

        return PropStat(prop=prop, status=status, response_description=desc)


@dataclass
class Response:
    """WebDAV response element."""

    hrefs: list[Href] = field(default_factory=list)
    propstats: list[PropStat] = field(default_factory=list)
    response_description: str = ""
    status: Status | None = None

    @staticmethod
    def from_xml(element: etree._Element) -> Response:
        """Parse from XML element."""
        hrefs = []
        for href_el in element.findall(f"{{{NAMESPACE}}}href"):
            if href_el.text:
                hrefs.append(Href.from_string(href_el.text))

        propstats = []
        for ps_el in element.findall(f"{{{NAMESPACE}}}propstat"):
            propstats.append(PropStat.from_xml(ps_el))

        desc_el = element.find(f"{{{NAMESPACE}}}responsedescription")
        desc = desc_el.text if desc_el is not None and desc_el.text else ""

        status_el = element.find(f"{{{NAMESPACE}}}status")
        status = None
        if status_el is not None and status_el.text:
            status = Status.from_string(status_el.text)

        return Response(
            hrefs=hrefs,
            propstats=propstats,
            response_description=desc,
            status=status,
        )

    def err(self) -> Exception | None:
        """Get error from response if any."""
        if self.status is None or self.status.ok():
            return None

        err: Exception | None = None
        if self.response_description:
            err = Exception(self.response_description)

        http_err = HTTPError(self.status.code, err)

        if len(self.hrefs) != 1:
            return http_err
        return HrefError(str(self.hrefs[0]), http_err)

    def path(self) -> str:
        """Get the (still percent-encoded) path of the single href."""
        err = self.err()
        if err is not None:
            raise err
        if len(self.hrefs) != 1:
            raise ValueError(
                f"webdav: malformed response: expected exactly one href element, got {len(self.hrefs)}"
            )
        return self.hrefs[0].url.path

    def properties(self) -> dict[str, etree._Element]:
        """Properties reported with a 2xx status, in document order."""
        found: dict[str, etree._Element] = {}
        for propstat in self.propstats:
            if not propstat.status.ok():
                continue
            for elem in propstat.prop.raw:
                found[elem.tag] = elem
        return found


@dataclass
class MultiStatus:
    """WebDAV multistatus response."""

    responses: list[Response] = field(default_factory=list)
    response_description: str = ""

    @staticmethod
    def from_xml(element: etree._Element) -> MultiStatus:
        """Parse from XML element."""
        if element.tag != f"{{{NAMESPACE}}}multistatus":
            raise ValueError(f"webdav: expected multistatus element, got {element.tag!r}")

        responses = []
        for resp_el in element.findall(f"{{{NAMESPACE}}}response"):
            responses.append(Response.from_xml(resp_el))

        response_desc_el = element.find(f"{{{NAMESPACE}}}responsedescription")
        response_desc = (
            response_desc_el.text
            if response_desc_el is not None and response_desc_el.text
            else ""
        )

        return MultiStatus(responses=responses, response_description=response_desc)


@dataclass
class PropFind:
    """WebDAV PROPFIND request."""

    prop: Prop | None = None

    def to_xml(self) -> etree._Element:
        """Convert to XML element."""
        pf = etree.Element(f"{{{NAMESPACE}}}propfind", nsmap={"d": NAMESPACE})

        if self.prop is not None:
            pf.append(self.prop.to_xml())
        else:
            etree.SubElement(pf, f"{{{NAMESPACE}}}allprop")

        return pf


@dataclass
class ResourceType:
    """WebDAV resourcetype property."""

    types: list[str] = field(default_factory=list)

    def is_type(self, tag: str) -> bool:
        """Check if resource has a specific type."""
        return tag in self.types

    @staticmethod
    def from_xml(element: etree._Element) -> ResourceType:
        """Parse from XML element."""
        types = [child.tag for child in element if isinstance(child.tag, str)]
        return ResourceType(types=types)
