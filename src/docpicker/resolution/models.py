"""Resolution data models."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OpenableColumns:
    """Column names every openable content row exposes."""

    DISPLAY_NAME = "_display_name"
    SIZE = "_size"


OPENABLE_PROJECTION = (OpenableColumns.DISPLAY_NAME, OpenableColumns.SIZE)


class MaterializedFile(BaseModel):
    """A byte copy created inside the cache directory.

    Attributes:
        path: Absolute location of the copy.
        size: Number of bytes written.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    size: int

    @property
    def uri(self) -> str:
        """Return the local URI reported to callers."""
        return str(self.path)


class ResolutionRecord(BaseModel):
    """Metadata and local copy produced for one reference.

    Fields that could not be determined stay ``None`` and are left out of
    :meth:`to_payload`.

    Attributes:
        local_uri: Path of the materialized copy.
        file_name: Best-effort display name.
        file_size: Size in bytes.
        mime_type: MIME type.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    local_uri: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """Return True when no field was populated."""
        return not self.to_payload()

    def to_payload(self) -> Dict[str, Any]:
        """Return the camelCase mapping handed back to the bridge caller."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RecordBuilder:
    """Accumulate optional record fields as individual lookups succeed."""

    def __init__(self) -> None:
        self._fields: Dict[str, Any] = {}

    def local_uri(self, value: str | None) -> "RecordBuilder":
        return self._set("local_uri", value)

    def file_name(self, value: str | None) -> "RecordBuilder":
        return self._set("file_name", value)

    def file_size(self, value: int | None) -> "RecordBuilder":
        return self._set("file_size", value)

    def mime_type(self, value: str | None) -> "RecordBuilder":
        return self._set("mime_type", value)

    def peek(self, name: str) -> Any:
        """Return a gathered field value without building the record."""
        return self._fields.get(name)

    def build(self) -> ResolutionRecord:
        """Freeze the gathered fields into a record."""
        return ResolutionRecord(**self._fields)

    def _set(self, name: str, value: Any) -> "RecordBuilder":
        if value is not None:
            self._fields[name] = value
        return self


__all__ = [
    "OpenableColumns",
    "OPENABLE_PROJECTION",
    "MaterializedFile",
    "ResolutionRecord",
    "RecordBuilder",
]
