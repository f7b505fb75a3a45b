"""Session state owned by the request orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lens_core.findings import EMPTY_RESULT_SET, ResultSet


class Phase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class AnalysisKind(Enum):
    NONE = "none"
    EMPTY_SCAN = "empty_scan"
    NUMERIC_SCAN = "numeric_scan"


class Document:
    """Loaded document: the analysed source and the editable display copy.

    ``original_text`` is captured once at load time and is what every scan
    receives. ``displayed_text`` starts as the pretty-printed form and follows
    the user's edits.
    """

    __slots__ = ("_original_text", "displayed_text", "path")

    def __init__(self, original_text: str, displayed_text: str, path: str = "") -> None:
        self._original_text = str(original_text)
        self.displayed_text = str(displayed_text)
        self.path = str(path or "")

    @property
    def original_text(self) -> str:
        return self._original_text

    def __repr__(self) -> str:
        return f"Document(path={self.path!r}, original={len(self._original_text)} chars)"


@dataclass(slots=True)
class EngineTask:
    """Record of the single in-flight engine or file call."""

    request_id: int
    kind: AnalysisKind
    done: bool = False
    payload: Any = None
    error: BaseException | None = None


@dataclass(slots=True)
class SessionState:
    """Phase, active analysis, results, last error and the loaded document."""

    phase: Phase = Phase.IDLE
    active_kind: AnalysisKind = AnalysisKind.NONE
    results: ResultSet = EMPTY_RESULT_SET
    error_message: str = ""
    document: Document | None = None
    active_task: EngineTask | None = field(default=None, repr=False)

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def has_document(self) -> bool:
        return self.document is not None

    def reset(self) -> None:
        """Back to Idle with no analysis, no results and no error. Keeps the document."""
        self.phase = Phase.IDLE
        self.active_kind = AnalysisKind.NONE
        self.results = EMPTY_RESULT_SET
        self.error_message = ""
        self.active_task = None

    def begin(self, kind: AnalysisKind, task: EngineTask) -> bool:
        if self.phase is Phase.LOADING:
            return False
        self.phase = Phase.LOADING
        self.active_kind = kind
        self.results = EMPTY_RESULT_SET
        self.error_message = ""
        self.active_task = task
        return True

    def succeed(self, results: ResultSet) -> None:
        self.phase = Phase.SUCCESS
        self.results = results
        self.error_message = ""
        self.active_task = None

    def fail(self, message: str) -> None:
        self.phase = Phase.ERROR
        self.results = EMPTY_RESULT_SET
        self.error_message = str(message or "")
        self.active_task = None
