"""Metadata resolution strategies, one per reference kind."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx

from .content import ContentResolver, DisplayNameLookup, last_path_segment, query_single_row
from .errors import MaterializationError
from .materializer import ByteMaterializer
from .mime import MimeTypeResolver
from .models import OpenableColumns, RecordBuilder, ResolutionRecord

LOGGER = logging.getLogger(__name__)


class ResolutionStrategy(Protocol):
    """Resolve metadata for one reference and materialize its bytes."""

    def resolve(self, reference: str) -> ResolutionRecord: ...


class LocalPathStrategy:
    """Resolve absolute filesystem paths."""

    def __init__(self, materializer: ByteMaterializer, mime_resolver: MimeTypeResolver) -> None:
        self._materializer = materializer
        self._mime = mime_resolver

    def resolve(self, reference: str) -> ResolutionRecord:
        path = Path(reference)
        builder = RecordBuilder()
        if not path.exists():
            LOGGER.debug("Local reference %s does not exist", reference)
            return builder.build()

        try:
            builder.local_uri(self._materializer.materialize(path.open("rb"), path.name).uri)
        except (MaterializationError, OSError) as exc:
            LOGGER.warning("Failed to materialize local file %s: %s", reference, exc)

        try:
            builder.file_size(path.stat().st_size)
        except OSError as exc:
            LOGGER.warning("Failed to stat local file %s: %s", reference, exc)
        builder.file_name(path.name or None)
        builder.mime_type(self._mime.resolve(str(path.absolute())))
        return builder.build()


class RemoteUrlStrategy:
    """Resolve HTTP(S) URLs by downloading them into the cache.

    Nothing is reported unless the whole body was written locally.
    """

    def __init__(
        self,
        materializer: ByteMaterializer,
        mime_resolver: MimeTypeResolver,
        names: DisplayNameLookup,
        client: httpx.Client,
    ) -> None:
        self._materializer = materializer
        self._mime = mime_resolver
        self._names = names
        self._client = client

    def resolve(self, reference: str) -> ResolutionRecord:
        builder = RecordBuilder()
        try:
            cache_name = self._names.lookup(reference)
            with self._client.stream("GET", reference) as response:
                response.raise_for_status()
                chunks = response.iter_bytes(chunk_size=self._materializer.buffer_size)
                downloaded = self._materializer.materialize(chunks, cache_name)
            size = downloaded.path.stat().st_size
        except (httpx.HTTPError, httpx.InvalidURL, MaterializationError, OSError, ValueError) as exc:
            LOGGER.warning("Failed to download %s: %s", reference, exc)
            return builder.build()

        builder.local_uri(downloaded.uri)
        builder.file_size(size)
        builder.file_name(last_path_segment(reference) or None)
        builder.mime_type(self._mime.resolve(reference))
        return builder.build()


class ContentHandleStrategy:
    """Resolve opaque handles through a content resolver, one lookup at a time."""

    def __init__(
        self,
        materializer: ByteMaterializer,
        resolver: ContentResolver,
        names: DisplayNameLookup,
    ) -> None:
        self._materializer = materializer
        self._resolver = resolver
        self._names = names

    def resolve(self, reference: str) -> ResolutionRecord:
        builder = RecordBuilder()

        try:
            builder.mime_type(self._resolver.get_type(reference))
        except Exception as exc:  # providers raise their own error types
            LOGGER.warning("Type lookup failed for %s: %s", reference, exc)

        try:
            row = query_single_row(self._resolver, reference)
        except Exception as exc:
            LOGGER.warning("Content query failed for %s: %s", reference, exc)
            row = None
        if row is not None:
            name = row.get(OpenableColumns.DISPLAY_NAME)
            builder.file_name(str(name) if name is not None else None)
            builder.file_size(_parse_size(row.get(OpenableColumns.SIZE), reference))

        self._materialize(reference, builder)
        return builder.build()

    def _materialize(self, reference: str, builder: RecordBuilder) -> None:
        name = builder.peek("file_name") or self._names.lookup(reference)
        try:
            source = self._resolver.open(reference)
        except Exception as exc:
            LOGGER.warning("Failed to open content stream for %s: %s", reference, exc)
            return
        try:
            builder.local_uri(self._materializer.materialize(source, name).uri)
        except MaterializationError as exc:
            LOGGER.warning("Failed to materialize content %s: %s", reference, exc)


def _parse_size(value: Any, reference: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        LOGGER.warning("Ignoring unparseable size %r for %s", value, reference)
        return None


__all__ = [
    "ResolutionStrategy",
    "LocalPathStrategy",
    "RemoteUrlStrategy",
    "ContentHandleStrategy",
]
