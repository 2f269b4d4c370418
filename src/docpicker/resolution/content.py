"""Content resolver interfaces and the display-name lookup built on them."""

from __future__ import annotations

import logging
from contextlib import closing
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Mapping, Optional, Protocol, Sequence
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from .errors import ContentError
from .mime import MimeTypeResolver
from .models import OPENABLE_PROJECTION, OpenableColumns

LOGGER = logging.getLogger(__name__)


class ContentCursor(Protocol):
    """Result of a content query; must be closed by whoever obtained it."""

    def fetchone(self) -> Optional[Mapping[str, Any]]: ...

    def close(self) -> None: ...


class ContentResolver(Protocol):
    """Platform services used to resolve content handles."""

    def get_type(self, reference: str) -> Optional[str]: ...

    def query(self, reference: str, projection: Sequence[str]) -> Optional[ContentCursor]: ...

    def open(self, reference: str) -> BinaryIO: ...


class RowCursor:
    """Cursor over a fixed list of rows."""

    def __init__(self, rows: Iterable[Mapping[str, Any]]) -> None:
        self._rows = list(rows)
        self._position = 0
        self.closed = False

    def fetchone(self) -> Optional[Mapping[str, Any]]:
        if self.closed:
            raise ContentError("cursor is closed")
        if self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return row

    def close(self) -> None:
        self.closed = True


class FileContentResolver:
    """Serve ``file://`` handles straight from the local filesystem."""

    scheme = "file"

    def __init__(self, mime_resolver: MimeTypeResolver | None = None) -> None:
        self._mime = mime_resolver or MimeTypeResolver()

    def get_type(self, reference: str) -> Optional[str]:
        path = self._path_for(reference)
        if path is None or not path.is_file():
            return None
        return self._mime.resolve(path.name)

    def query(self, reference: str, projection: Sequence[str]) -> Optional[RowCursor]:
        path = self._path_for(reference)
        if path is None or not path.is_file():
            return None
        available = {
            OpenableColumns.DISPLAY_NAME: path.name,
            OpenableColumns.SIZE: path.stat().st_size,
        }
        return RowCursor([{column: available.get(column) for column in projection}])

    def open(self, reference: str) -> BinaryIO:
        path = self._path_for(reference)
        if path is None:
            raise ContentError(f"No content provider for {reference!r}")
        return path.open("rb")

    def _path_for(self, reference: str) -> Optional[Path]:
        parts = urlsplit(reference)
        if parts.scheme != self.scheme or parts.netloc not in ("", "localhost"):
            return None
        return Path(url2pathname(parts.path))


def query_single_row(
    resolver: ContentResolver,
    reference: str,
    projection: Sequence[str] = OPENABLE_PROJECTION,
) -> Optional[Mapping[str, Any]]:
    """Return the first row a content query yields, releasing the cursor in all cases."""
    cursor = resolver.query(reference, projection)
    if cursor is None:
        return None
    with closing(cursor):
        row = cursor.fetchone()
        return dict(row) if row is not None else None


def _scheme(reference: str) -> str:
    try:
        return urlsplit(reference).scheme.lower()
    except ValueError:
        return ""


def last_path_segment(reference: str) -> str:
    """Return the text after the last ``/`` of the reference's path."""
    path = urlsplit(reference).path if _scheme(reference) else reference
    return unquote(path.rsplit("/", 1)[-1])


class DisplayNameLookup:
    """Best-effort display name for references that lack an obvious one."""

    def __init__(
        self, resolver: ContentResolver, content_schemes: Iterable[str] = ("content",)
    ) -> None:
        self._resolver = resolver
        self._schemes = frozenset(scheme.lower() for scheme in content_schemes)

    def lookup(self, reference: str) -> str:
        """Return the provider's display name, or the last path segment as a fallback."""
        name: Optional[str] = None
        if _scheme(reference) in self._schemes:
            try:
                row = query_single_row(self._resolver, reference)
            except Exception as exc:  # providers raise their own error types
                LOGGER.warning("Display name query failed for %s: %s", reference, exc)
                row = None
            if row is not None:
                value = row.get(OpenableColumns.DISPLAY_NAME)
                name = str(value) if value is not None else None
        if not name:
            name = last_path_segment(reference)
        return name


__all__ = [
    "ContentCursor",
    "ContentResolver",
    "RowCursor",
    "FileContentResolver",
    "DisplayNameLookup",
    "query_single_row",
    "last_path_segment",
]
