"""Document I/O helpers: choosing, reading, parsing and pretty-printing JSON text."""

import json
import logging
import os
from typing import Any

from lens_core.constants import FILE_SELECTION_CANCELED
from lens_core.constants import JSON_FILE_TYPES
from lens_core.constants import OPEN_DIALOG_TITLE
from lens_core.constants import PRETTY_INDENT
from lens_core.exceptions import FileError
from lens_services.ui_dispatch_service import dispatch_to_ui

_LOG = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_text(text: Any) -> Any:
    """Parse strict JSON (NaN/Infinity literals rejected). Raises ValueError."""
    return json.loads(str(text or ""), parse_constant=_reject_constant)


def build_pretty_json_text(data: Any) -> str:
    """Canonical display form shown in the text view."""
    return json.dumps(data, indent=PRETTY_INDENT, ensure_ascii=False)


def prepare_display_text(raw_text: Any) -> str:
    """Validate raw document text and return its pretty form, or raise FileError."""
    try:
        data = parse_json_text(raw_text)
    except ValueError as exc:
        raise FileError(f"JSON parsing error: {exc}") from exc
    return build_pretty_json_text(data)


def read_document_text(path: Any) -> str:
    use_path = str(path or "")
    if not use_path:
        raise FileError(FILE_SELECTION_CANCELED)
    try:
        # Accept UTF-8 with or without BOM.
        with open(use_path, "r", encoding="utf-8-sig") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileError(str(exc)) from exc
    _LOG.info("Read %s (%d chars).", use_path, len(text))
    return text


class PathDocumentSource:
    """Document source bound to a fixed path."""

    def __init__(self, path: Any) -> None:
        self.path = str(path or "")

    def open_and_read_document(self) -> str:
        return read_document_text(self.path)


class TkDocumentSource:
    """Document source that asks the user for a file with the native dialog.

    ``open_and_read_document`` is called from a worker thread; the dialog is
    shown on the UI thread and the worker blocks until it closes.
    """

    def __init__(self, owner: Any, filedialog_module: Any) -> None:
        self.owner = owner
        self.filedialog = filedialog_module
        self.initial_dir = ""
        self.path = ""

    def _ask_path(self) -> str:
        options = {"title": OPEN_DIALOG_TITLE, "filetypes": JSON_FILE_TYPES}
        if self.initial_dir:
            options["initialdir"] = self.initial_dir
        return str(self.filedialog.askopenfilename(**options) or "")

    def open_and_read_document(self) -> str:
        path = dispatch_to_ui(self.owner, self._ask_path, wait=True, default="")
        if not path:
            _LOG.info("User cancelled file dialog.")
            raise FileError(FILE_SELECTION_CANCELED)
        _LOG.info("User selected file: %s", path)
        text = read_document_text(path)
        self.path = path
        self.initial_dir = os.path.dirname(path)
        return text
