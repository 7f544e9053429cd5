"""Configuration for connecting the adapter to a WebDAV server.

Defaults are read from the environment:

- ``WEBDAV_BASE_URI``: server endpoint, e.g. ``https://cloud.example.com/remote.php/dav/files/me/``
- ``WEBDAV_USERNAME`` / ``WEBDAV_PASSWORD``: basic auth credentials
- ``WEBDAV_PREFIX``: root of the filesystem below the endpoint (default ``/``)
- ``WEBDAV_TIMEOUT``: request timeout in seconds (default 30)
- ``WEBDAV_VERIFY_SSL``: set to ``0``/``false`` to skip certificate checks
- ``WEBDAV_DEBUG``: set to ``1``/``true`` to log every request and response
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import httpx

from .adapter import WebDAVFilesystem
from .debug import log_request, log_response, setup_debug_logging
from .internal import Client


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    return float(value)


@dataclass
class WebDAVConfig:
    """Connection settings for a WebDAV server."""

    base_uri: str = field(default_factory=lambda: os.getenv("WEBDAV_BASE_URI", ""))
    username: str | None = field(default_factory=lambda: os.getenv("WEBDAV_USERNAME") or None)
    password: str | None = field(default_factory=lambda: os.getenv("WEBDAV_PASSWORD") or None)
    prefix: str = field(default_factory=lambda: os.getenv("WEBDAV_PREFIX") or "/")

    # HTTP configuration
    timeout: float = field(default_factory=lambda: _env_float("WEBDAV_TIMEOUT", 30.0))
    verify_ssl: bool = field(default_factory=lambda: _env_flag("WEBDAV_VERIFY_SSL", True))
    debug: bool = field(default_factory=lambda: _env_flag("WEBDAV_DEBUG", False))

    @property
    def auth(self) -> tuple[str, str] | None:
        if not self.username:
            return None
        return (self.username, self.password or "")


def create_http_client(config: WebDAVConfig, **kwargs) -> httpx.Client:
    """Create the httpx client used as transport.

    Args:
        config: Connection settings
        **kwargs: Extra ``httpx.Client`` arguments (e.g. ``transport``)

    Returns:
        Configured httpx client
    """
    event_hooks = {}
    if config.debug:
        setup_debug_logging()
        event_hooks = {"request": [log_request], "response": [log_response]}

    return httpx.Client(
        auth=config.auth,
        timeout=config.timeout,
        verify=config.verify_ssl,
        follow_redirects=True,
        event_hooks=event_hooks,
        **kwargs,
    )


def create_client(config: WebDAVConfig, **kwargs) -> Client:
    """Create a WebDAV transport client for the configured endpoint."""
    if not config.base_uri:
        raise ValueError("webdav: no base URI configured (set WEBDAV_BASE_URI)")
    return Client(create_http_client(config, **kwargs), config.base_uri)


def create_filesystem(config: WebDAVConfig | None = None, **kwargs) -> WebDAVFilesystem:
    """Create a filesystem adapter from configuration.

    Args:
        config: Connection settings (read from the environment if None)
        **kwargs: Extra ``httpx.Client`` arguments

    Returns:
        WebDAVFilesystem rooted at ``config.prefix``
    """
    config = config or WebDAVConfig()
    return WebDAVFilesystem(create_client(config, **kwargs), config.prefix)
