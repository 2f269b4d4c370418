"""Copy byte sources into the private cache directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Union

from .errors import CacheDirectoryError, MaterializationError
from .models import MaterializedFile

LOGGER = logging.getLogger(__name__)

ByteSource = Union[BinaryIO, Iterable[bytes]]

_UNSAFE_NAME_CHARS = str.maketrans({"/": "_", "\\": "_", "\x00": "_"})


def safe_file_name(name: str | None) -> str:
    """Return ``name`` with characters that could escape the cache directory replaced."""
    if not name:
        return ""
    cleaned = name.translate(_UNSAFE_NAME_CHARS)
    if cleaned in {".", ".."}:
        return cleaned.replace(".", "_")
    return cleaned


class ByteMaterializer:
    """Create uniquely named cache files and fill them from a byte source."""

    def __init__(self, cache_dir: Path, *, prefix: str = "prefix", buffer_size: int = 1024) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.cache_dir = Path(cache_dir).expanduser()
        self.prefix = prefix
        self.buffer_size = buffer_size

    def ensure_cache_dir(self) -> Path:
        """Create the cache directory if needed and confirm it is writable.

        Raises:
            CacheDirectoryError: If the directory cannot be created or written to.
        """
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheDirectoryError(f"Cannot create cache directory {self.cache_dir}: {exc}") from exc
        if not self.cache_dir.is_dir() or not os.access(self.cache_dir, os.W_OK | os.X_OK):
            raise CacheDirectoryError(f"Cache directory {self.cache_dir} is not writable")
        return self.cache_dir

    def materialize(self, source: ByteSource, file_name: str | None) -> MaterializedFile:
        """Copy every byte of ``source`` into a new file named after ``file_name``.

        ``source`` is closed once the copy finishes or fails when it exposes
        ``close()``. A failed copy never leaves a partial file behind.

        Args:
            source: Binary file object or iterable of byte chunks.
            file_name: Original or best-guessed name, used as the filename suffix.

        Returns:
            MaterializedFile: Path and size of the created copy.

        Raises:
            MaterializationError: If the source cannot be read or the copy cannot be written.
        """
        try:
            fd, raw_path = tempfile.mkstemp(
                prefix=self.prefix,
                suffix=safe_file_name(file_name),
                dir=self.cache_dir,
            )
        except OSError as exc:
            _close_quietly(source)
            raise MaterializationError(f"Cannot create cache file in {self.cache_dir}: {exc}") from exc

        path = Path(raw_path).absolute()
        written = 0
        try:
            with os.fdopen(fd, "wb") as destination:
                for chunk in self._iter_chunks(source):
                    destination.write(chunk)
                    written += len(chunk)
        except Exception as exc:
            path.unlink(missing_ok=True)
            raise MaterializationError(f"Failed to copy into {path.name}: {exc}") from exc
        finally:
            _close_quietly(source)

        LOGGER.debug("Materialized %d bytes into %s", written, path)
        return MaterializedFile(path=path, size=written)

    def _iter_chunks(self, source: ByteSource) -> Iterator[bytes]:
        read = getattr(source, "read", None)
        if callable(read):
            while True:
                chunk = read(self.buffer_size)
                if not chunk:
                    return
                yield chunk
        else:
            for chunk in source:  # type: ignore[union-attr]
                if chunk:
                    yield chunk


def _close_quietly(source: ByteSource) -> None:
    close = getattr(source, "close", None)
    if not callable(close):
        return
    try:
        close()
    except OSError as exc:  # pragma: no cover - nothing left to do with a broken source
        LOGGER.debug("Ignoring error while closing byte source: %s", exc)


__all__ = ["ByteMaterializer", "ByteSource", "safe_file_name"]
