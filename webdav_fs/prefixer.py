"""Mapping between logical paths and server paths."""

from __future__ import annotations


class PathPrefixer:
    """Join a configured root prefix with logical paths.

    Logical paths never contain the prefix. Duplicate separators are
    collapsed and leading/trailing ones dropped, so normalizing a path
    twice gives the same result as normalizing it once.
    """

    def __init__(self, prefix: str = "/", separator: str = "/"):
        self.separator = separator
        normalized = self.normalize(prefix)
        self.prefix = f"{separator}{normalized}{separator}" if normalized else separator

    def normalize(self, path: str) -> str:
        """Collapse separators and strip them from both ends."""
        return self.separator.join(
            segment for segment in path.split(self.separator) if segment
        )

    def prefix_path(self, path: str) -> str:
        """Server path of a logical path."""
        return self.prefix + self.normalize(path)

    def prefix_directory_path(self, path: str) -> str:
        """Server path of a logical directory, with a trailing separator."""
        normalized = self.normalize(path)
        if not normalized:
            return self.prefix
        return f"{self.prefix}{normalized}{self.separator}"

    def strip_prefix(self, path: str) -> str:
        """Logical path of a server path.

        Paths that are not below the prefix are only normalized.
        """
        normalized = self.separator + self.normalize(path)
        if normalized == self.prefix.rstrip(self.separator):
            return ""
        if normalized.startswith(self.prefix):
            normalized = normalized[len(self.prefix):]
        return self.normalize(normalized)

    def __repr__(self) -> str:
        return f"<PathPrefixer prefix={self.prefix!r}>"
