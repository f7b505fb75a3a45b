"""Pytest fixtures for test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from lens_core.exceptions import FileError
from lens_core.session_state import SessionState
from lens_services.request_orchestrator_service import RequestOrchestrator
from lens_services.task_runner_service import InlineTaskRunner


# =============================================================================
# Collaborator doubles
# =============================================================================


class DeferredTaskRunner:
    """Holds started tasks until the test completes them, like a slow engine."""

    def __init__(self) -> None:
        self.pending: list[tuple[Any, Callable[[], Any], Callable[[Any], Any]]] = []

    def start(self, task, work, on_done) -> None:
        self.pending.append((task, work, on_done))

    def complete_next(self) -> None:
        task, work, on_done = self.pending.pop(0)
        InlineTaskRunner().start(task, work, on_done)


class RecordingEngine:
    """Engine double that records its inputs and replies with canned results."""

    def __init__(self, empty_reply: Any = None, numeric_reply: Any = None) -> None:
        self.calls: list[tuple] = []
        self.empty_reply = empty_reply if empty_reply is not None else {"findings": [], "elapsedMs": 1}
        self.numeric_reply = numeric_reply if numeric_reply is not None else {"findings": [], "elapsedMs": 1}

    def _reply(self, reply: Any) -> Any:
        if isinstance(reply, Exception):
            raise reply
        return reply

    def scan_empty_values(self, raw_text):
        self.calls.append(("empty", raw_text))
        return self._reply(self.empty_reply)

    def scan_invalid_numerics(self, raw_text, schema_ddl):
        self.calls.append(("numeric", raw_text, schema_ddl))
        return self._reply(self.numeric_reply)


class FixedDocumentSource:
    def __init__(self, text: Any, path: str = "records.json") -> None:
        self.text = text
        self.path = path
        self.reads = 0

    def open_and_read_document(self) -> str:
        self.reads += 1
        if isinstance(self.text, Exception):
            raise self.text
        return self.text


class Recorder:
    """Collects orchestrator callbacks."""

    def __init__(self) -> None:
        self.changes: list[Any] = []
        self.highlights: list[tuple] = []

    def on_change(self, session) -> None:
        self.changes.append(session.phase)

    def on_highlight(self, text_range, finding) -> None:
        self.highlights.append((text_range, finding))


# =============================================================================
# Fixtures
# =============================================================================


SAMPLE_RECORDS = '[{"id":1,"name":""},{"id":2,"name":"x"}]'


@pytest.fixture
def session() -> SessionState:
    return SessionState()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def deferred_runner() -> DeferredTaskRunner:
    return DeferredTaskRunner()


@pytest.fixture
def source() -> FixedDocumentSource:
    return FixedDocumentSource(SAMPLE_RECORDS)


@pytest.fixture
def make_orchestrator(session, recorder) -> Callable[..., RequestOrchestrator]:
    def _make(engine: Any, source: Any = None, runner: Any = None, **kwargs: Any) -> RequestOrchestrator:
        return RequestOrchestrator(
            session,
            engine,
            source if source is not None else FixedDocumentSource(FileError("no file")),
            runner if runner is not None else InlineTaskRunner(),
            on_change=recorder.on_change,
            on_highlight=recorder.on_highlight,
            **kwargs,
        )

    return _make
