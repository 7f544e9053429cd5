"""Debug logging utilities for the WebDAV adapter."""

from __future__ import annotations

import logging

import httpx
from lxml import etree

logger = logging.getLogger("webdav_fs")
DEBUG_HANDLER_NAME = "webdav_fs.debug"

INTERESTING_REQUEST_HEADERS = [
    "Content-Type",
    "Content-Length",
    "Depth",
    "Destination",
    "Overwrite",
    "Authorization",
]
INTERESTING_RESPONSE_HEADERS = ["Content-Type", "Content-Length", "ETag", "DAV", "Location"]


def format_xml(xml_bytes: bytes | str) -> str:
    """Format XML with proper indentation.

    Args:
        xml_bytes: XML content as bytes or string

    Returns:
        Pretty-formatted XML string
    """
    if isinstance(xml_bytes, str):
        xml_bytes = xml_bytes.encode("utf-8")

    try:
        parser = etree.XMLParser(remove_blank_text=True)
        root = etree.fromstring(xml_bytes, parser)
    except etree.XMLSyntaxError:
        # Not well-formed, log it as-is
        return xml_bytes.decode("utf-8", errors="replace")
    return etree.tostring(root, pretty_print=True, encoding="unicode")


def is_xml_content(content_type: str | None) -> bool:
    """Check if content type is XML.

    Args:
        content_type: Content-Type header value

    Returns:
        True if content type indicates XML
    """
    if not content_type:
        return False

    xml_types = ["application/xml", "text/xml"]
    return any(xml_type in content_type.lower() for xml_type in xml_types)


def _log_headers(headers: httpx.Headers, names: list[str]) -> None:
    logger.debug("Headers:")
    for header in names:
        value = headers.get(header)
        if value:
            # Redact authorization
            if header == "Authorization":
                value = "[REDACTED]"
            logger.debug(f"  {header}: {value}")


def _log_body(body: bytes, content_type: str | None) -> None:
    if is_xml_content(content_type):
        for line in format_xml(body).split("\n"):
            if line.strip():
                logger.debug(f"  {line}")
    else:
        # Log non-XML bodies with size info
        body_preview = body[:200].decode("utf-8", errors="replace")
        logger.debug(f"  [{len(body)} bytes] {body_preview}")
        if len(body) > 200:
            logger.debug(f"  ... ({len(body) - 200} more bytes)")


def log_request(request: httpx.Request) -> None:
    """Log an outgoing HTTP request (httpx ``request`` event hook).

    Args:
        request: Request about to be sent
    """
    logger.debug("=" * 80)
    logger.debug(f">>> OUTGOING REQUEST: {request.method} {request.url}")
    logger.debug("-" * 80)
    _log_headers(request.headers, INTERESTING_REQUEST_HEADERS)

    try:
        body = request.content
    except httpx.RequestNotRead:
        logger.debug("Request Body: [streamed]")
    else:
        if body:
            logger.debug("-" * 80)
            logger.debug("Request Body:")
            _log_body(body, request.headers.get("Content-Type"))

    logger.debug("=" * 80)


def log_response(response: httpx.Response) -> None:
    """Log an incoming HTTP response (httpx ``response`` event hook).

    Only multistatus bodies are read here; file bodies may be streamed and
    are left untouched.

    Args:
        response: Response received from the server
    """
    logger.debug("=" * 80)
    logger.debug(
        f"<<< INCOMING RESPONSE: {response.status_code} "
        f"for {response.request.method} {response.request.url}"
    )
    logger.debug("-" * 80)
    _log_headers(response.headers, INTERESTING_RESPONSE_HEADERS)

    if response.request.method == "PROPFIND":
        body = response.read()
        if body:
            logger.debug("-" * 80)
            logger.debug("Response Body:")
            _log_body(body, response.headers.get("Content-Type"))

    logger.debug("=" * 80)


def setup_debug_logging() -> None:
    """Configure debug logging for the WebDAV adapter.

    Calling it again leaves the existing handler in place.
    """
    # Configure logger
    logger.setLevel(logging.DEBUG)

    if any(h.get_name() == DEBUG_HANDLER_NAME for h in logger.handlers):
        return

    # Create console handler with custom formatter
    handler = logging.StreamHandler()
    handler.set_name(DEBUG_HANDLER_NAME)
    handler.setLevel(logging.DEBUG)

    # Simple format - just the message (since we format the logs ourselves)
    formatter = logging.Formatter("%(message)s")
    handler.setFormatter(formatter)

    # Add handler to logger
    logger.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False
