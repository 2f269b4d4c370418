"""Glue between an external document chooser and the resolution pipeline."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel

from docpicker.resolution import DocumentResolver

LOGGER = logging.getLogger(__name__)

READ_REQUEST_CODE = 41
RESULT_OK = -1
RESULT_CANCELED = 0

PickCallback = Callable[[Optional[str], Optional[Dict[str, Any]]], None]


class PickOptions(BaseModel):
    """Arguments accepted by :meth:`DocumentPickerBridge.show`.

    Attributes:
        filetype: Requested MIME types; only the first one is forwarded to the chooser.
    """

    filetype: Optional[List[str]] = None

    @property
    def type_hint(self) -> str:
        if self.filetype:
            return self.filetype[0]
        return "*/*"


class DocumentChooser(Protocol):
    """The platform chooser that lets a user pick one openable document."""

    def launch(self, request_code: int, type_hint: str) -> None: ...


class DocumentPickerBridge:
    """Launch the chooser and answer the caller once the pick is resolved."""

    def __init__(self, chooser: DocumentChooser, resolver: DocumentResolver) -> None:
        self._chooser = chooser
        self._resolver = resolver
        self._callback: PickCallback | None = None

    def show(self, options: PickOptions | None, callback: PickCallback) -> None:
        """Start a pick; ``callback(error, payload)`` fires once the chooser returns."""
        options = options or PickOptions()
        self._callback = callback
        self._chooser.launch(READ_REQUEST_CODE, options.type_hint)

    def on_result(self, request_code: int, result_code: int, data: str | None) -> None:
        """Handle the chooser result and report through the pending callback."""
        if request_code != READ_REQUEST_CODE:
            return

        callback = self._callback
        if callback is None:
            LOGGER.warning("Chooser result %s arrived with no pending pick", result_code)
            return
        self._callback = None

        if result_code != RESULT_OK:
            callback(f"Bad result code: {result_code}", None)
            return
        if data is None:
            callback("No data", None)
            return

        try:
            record = self._resolver.resolve(data)
        except Exception as exc:
            LOGGER.exception("Failed to read %s", data)
            callback(str(exc), None)
            return
        callback(None, record.to_payload())


__all__ = [
    "READ_REQUEST_CODE",
    "RESULT_OK",
    "RESULT_CANCELED",
    "PickOptions",
    "DocumentChooser",
    "DocumentPickerBridge",
]
