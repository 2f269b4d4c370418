"""Reference classification."""

from __future__ import annotations

from enum import Enum


class ReferenceKind(str, Enum):
    """Resolution strategy selected for a reference."""

    LOCAL_PATH = "local-path"
    REMOTE_URL = "remote-url"
    CONTENT_HANDLE = "content-handle"


class ReferenceClassifier:
    """Pick the resolution strategy for a reference from its textual prefix.

    Anything that is neither an absolute path nor an HTTP(S) URL is treated as a
    content handle, including malformed references.
    """

    def classify(self, reference: str) -> ReferenceKind:
        """Return the strategy kind for ``reference``."""
        text = str(reference)
        if text.startswith("/"):
            return ReferenceKind.LOCAL_PATH
        if text.startswith("http"):
            return ReferenceKind.REMOTE_URL
        return ReferenceKind.CONTENT_HANDLE
