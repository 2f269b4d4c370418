"""Extension based MIME type lookup."""

from __future__ import annotations

import mimetypes
import re
from typing import Dict, Optional
from urllib.parse import urlsplit

_SAFE_FILENAME = re.compile(r"^[A-Za-z0-9_.\-()%~!$&'*+,;=@]+$")

# Document types pickers commonly hand back that older mimetypes tables lack.
_EXTRA_TYPES: Dict[str, str] = {
    "apk": "application/vnd.android.package-archive",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odt": "application/vnd.oasis.opendocument.text",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "epub": "application/epub+zip",
    "heic": "image/heic",
    "heif": "image/heif",
    "webp": "image/webp",
    "m4a": "audio/mp4",
    "3gp": "video/3gpp",
    "mkv": "video/x-matroska",
    "md": "text/markdown",
}


def extension_from_url(value: str) -> Optional[str]:
    """Return the extension of the last path segment of ``value``.

    Query strings and fragments are ignored. Like Android's
    ``MimeTypeMap.getFileExtensionFromUrl``, a segment holding characters
    outside the URL-safe filename set (spaces, non-ASCII letters) yields no
    extension, so ``my report.pdf`` has no MIME type while ``my%20report.pdf`` does.
    """
    if not value:
        return None
    path = value.split("#", 1)[0].split("?", 1)[0]
    if "://" in path:
        try:
            path = urlsplit(path).path
        except ValueError:
            path = path.split("://", 1)[1]
    name = path.rsplit("/", 1)[-1]
    if "." not in name or not _SAFE_FILENAME.match(name):
        return None
    extension = name.rsplit(".", 1)[-1]
    return extension or None


class MimeTypeResolver:
    """Map file names, paths and URLs to MIME types by extension."""

    def __init__(self, extra_types: Dict[str, str] | None = None) -> None:
        # Only the interpreter's built-in table; host files would make results machine dependent.
        self._db = mimetypes.MimeTypes(filenames=())
        self._extra = dict(_EXTRA_TYPES)
        if extra_types:
            self._extra.update({key.lower().lstrip("."): value for key, value in extra_types.items()})

    def for_extension(self, extension: str | None) -> Optional[str]:
        """Return the MIME type registered for ``extension``."""
        if not extension:
            return None
        key = extension.lower().lstrip(".")
        if key in self._extra:
            return self._extra[key]
        dotted = f".{key}"
        return self._db.types_map[True].get(dotted) or self._db.types_map[False].get(dotted)

    def resolve(self, name: str) -> Optional[str]:
        """Return the MIME type for a file name, path or URL, or None when unknown."""
        return self.for_extension(extension_from_url(name))


__all__ = ["MimeTypeResolver", "extension_from_url"]
