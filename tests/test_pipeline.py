"""Tests covering the resolution pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import List

import httpx
import pytest

from docpicker.config.models import DocPickerConfig
from docpicker.resolution import (
    ByteMaterializer,
    CacheDirectoryError,
    DocumentResolver,
    ReferenceKind,
    ResolutionRecord,
)


class RecordingStrategy:
    def __init__(self, name: str) -> None:
        self.name = name
        self.calls: List[str] = []

    def resolve(self, reference: str) -> ResolutionRecord:
        self.calls.append(reference)
        return ResolutionRecord(file_name=self.name)


def _mock_client(payload: bytes = b"remote") -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("missing.txt"):
            return httpx.Response(404)
        return httpx.Response(200, content=payload)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_dispatches_each_kind_to_its_strategy(materializer: ByteMaterializer) -> None:
    strategies = {kind: RecordingStrategy(kind.value) for kind in ReferenceKind}
    resolver = DocumentResolver(materializer, strategies)

    assert resolver.resolve("/sdcard/a.txt").file_name == "local-path"
    assert resolver.resolve("https://example.com/a.txt").file_name == "remote-url"
    assert resolver.resolve("content://media/external/1").file_name == "content-handle"
    assert strategies[ReferenceKind.LOCAL_PATH].calls == ["/sdcard/a.txt"]


def test_requires_a_strategy_for_every_kind(materializer: ByteMaterializer) -> None:
    with pytest.raises(ValueError, match="remote-url"):
        DocumentResolver(
            materializer,
            {
                ReferenceKind.LOCAL_PATH: RecordingStrategy("local"),
                ReferenceKind.CONTENT_HANDLE: RecordingStrategy("content"),
            },
        )


def test_local_example(tmp_path: Path, materializer: ByteMaterializer) -> None:
    source = tmp_path / "storage" / "emulated" / "0" / "report.pdf"
    source.parent.mkdir(parents=True)
    source.write_bytes(b"x" * 2048)

    with DocumentResolver.build(materializer, http_client=_mock_client()) as resolver:
        record = resolver.resolve(str(source))

    payload = record.to_payload()
    assert payload.pop("localUri").startswith(str(materializer.cache_dir))
    assert payload == {"fileName": "report.pdf", "fileSize": 2048, "mimeType": "application/pdf"}


def test_remote_404_example(materializer: ByteMaterializer) -> None:
    resolver = DocumentResolver.build(materializer, http_client=_mock_client())

    assert resolver.resolve("https://example.com/missing.txt").to_payload() == {}


def test_remote_success(materializer: ByteMaterializer) -> None:
    resolver = DocumentResolver.build(materializer, http_client=_mock_client(b"12345"))

    record = resolver.resolve("https://example.com/notes.txt")

    assert record.file_size == 5
    assert record.file_name == "notes.txt"


def test_missing_local_file_does_not_raise(tmp_path: Path, materializer: ByteMaterializer) -> None:
    resolver = DocumentResolver.build(materializer, http_client=_mock_client())

    assert resolver.resolve(str(tmp_path / "absent.pdf")).is_empty


def test_malformed_reference_falls_through_to_content_resolver(
    materializer: ByteMaterializer,
) -> None:
    # Known edge case: classification is fail-open, so junk ends up as an empty record.
    resolver = DocumentResolver.build(materializer, http_client=_mock_client())

    assert resolver.resolve("definitely not a reference").is_empty


def test_creates_missing_cache_directory(tmp_path: Path) -> None:
    cache = tmp_path / "late" / "cache"
    source = tmp_path / "a.txt"
    source.write_text("a", encoding="utf-8")
    resolver = DocumentResolver.build(ByteMaterializer(cache), http_client=_mock_client())

    record = resolver.resolve(str(source))

    assert Path(record.local_uri).parent == cache


def test_unusable_cache_directory_is_a_hard_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "cache"
    blocker.write_text("file in the way", encoding="utf-8")
    resolver = DocumentResolver.build(ByteMaterializer(blocker), http_client=_mock_client())

    with pytest.raises(CacheDirectoryError):
        resolver.resolve("/does/not/matter.txt")


def test_from_config_applies_cache_settings(tmp_path: Path) -> None:
    config = DocPickerConfig.model_validate(
        {"cache": {"directory": str(tmp_path / "c"), "prefix": "dp-", "buffer_size": 16}}
    )
    source = tmp_path / "doc.md"
    source.write_text("# title", encoding="utf-8")

    with DocumentResolver.from_config(config, http_client=_mock_client()) as resolver:
        assert resolver.materializer.buffer_size == 16
        record = resolver.resolve(str(source))

    local = Path(record.local_uri)
    assert local.parent == tmp_path / "c"
    assert local.name.startswith("dp-")
    assert record.mime_type == "text/markdown"


def test_close_releases_owned_client_only(materializer: ByteMaterializer) -> None:
    shared = _mock_client()
    borrowed = DocumentResolver.build(materializer, http_client=shared)
    borrowed.close()
    assert not shared.is_closed

    owned = DocumentResolver.build(materializer)
    client = owned._owned_client
    owned.close()
    assert client is not None and client.is_closed
