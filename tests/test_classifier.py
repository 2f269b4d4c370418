"""Tests for reference classification."""

import pytest

from docpicker.resolution import ReferenceClassifier, ReferenceKind


@pytest.mark.parametrize(
    ("reference", "kind"),
    [
        ("/storage/emulated/0/report.pdf", ReferenceKind.LOCAL_PATH),
        ("/", ReferenceKind.LOCAL_PATH),
        ("http://example.com/a.txt", ReferenceKind.REMOTE_URL),
        ("https://example.com/a.txt", ReferenceKind.REMOTE_URL),
        ("content://com.android.providers.downloads.documents/document/12", ReferenceKind.CONTENT_HANDLE),
        ("file:///tmp/a.txt", ReferenceKind.CONTENT_HANDLE),
    ],
)
def test_classify_by_prefix(reference: str, kind: ReferenceKind) -> None:
    assert ReferenceClassifier().classify(reference) is kind


def test_classification_is_stable() -> None:
    classifier = ReferenceClassifier()
    reference = "https://example.com/report.pdf"

    kinds = {classifier.classify(reference) for _ in range(5)}

    assert kinds == {ReferenceKind.REMOTE_URL}


@pytest.mark.parametrize("reference", ["", "relative/path.txt", "ftp://host/file", "garbage"])
def test_unrecognized_references_fall_through_to_content_handles(reference: str) -> None:
    # Known edge case: malformed references are not rejected, they go to the content resolver.
    assert ReferenceClassifier().classify(reference) is ReferenceKind.CONTENT_HANDLE
