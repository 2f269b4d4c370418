"""Shared fixtures and fakes for the resolution tests."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Sequence

import pytest

from docpicker.resolution import ByteMaterializer, ContentError, RowCursor


class TrackingCursor(RowCursor):
    """Row cursor that can be told to fail while a row is read."""

    def __init__(self, rows: List[Mapping[str, Any]], fail_on_fetch: bool = False) -> None:
        super().__init__(rows)
        self.fail_on_fetch = fail_on_fetch

    def fetchone(self) -> Optional[Mapping[str, Any]]:
        if self.fail_on_fetch:
            raise ContentError("cursor exploded")
        return super().fetchone()


class FakeContentResolver:
    """In-memory content resolver keyed by reference."""

    def __init__(self) -> None:
        self.types: Dict[str, str] = {}
        self.rows: Dict[str, List[Mapping[str, Any]]] = {}
        self.payloads: Dict[str, bytes] = {}
        self.failures: Dict[str, Exception] = {}
        self.fail_on_fetch = False
        self.cursors: List[TrackingCursor] = []
        self.opened: List[BinaryIO] = []

    def get_type(self, reference: str) -> Optional[str]:
        if "get_type" in self.failures:
            raise self.failures["get_type"]
        return self.types.get(reference)

    def query(self, reference: str, projection: Sequence[str]) -> Optional[TrackingCursor]:
        if "query" in self.failures:
            raise self.failures["query"]
        if reference not in self.rows:
            return None
        cursor = TrackingCursor(
            [{column: row.get(column) for column in projection} for row in self.rows[reference]],
            fail_on_fetch=self.fail_on_fetch,
        )
        self.cursors.append(cursor)
        return cursor

    def open(self, reference: str) -> BinaryIO:
        if "open" in self.failures:
            raise self.failures["open"]
        if reference not in self.payloads:
            raise FileNotFoundError(reference)
        stream = io.BytesIO(self.payloads[reference])
        self.opened.append(stream)
        return stream


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def materializer(cache_dir: Path) -> ByteMaterializer:
    return ByteMaterializer(cache_dir, prefix="pick-", buffer_size=64)


@pytest.fixture
def content_resolver() -> FakeContentResolver:
    return FakeContentResolver()
