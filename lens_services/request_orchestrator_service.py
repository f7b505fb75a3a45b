"""Request orchestration service.

Drives the session through its load/analyze/highlight cycle. Every engine or
file call runs as one ``EngineTask``; at most one is in flight, and a request
made while the session is Loading is refused, not queued. All session
mutation happens here, on the UI thread.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable

from lens_core.exceptions import EngineError, FileError
from lens_core.findings import Finding, FINDING_KIND_EMPTY, FINDING_KIND_NUMERIC, result_set_from_payload
from lens_core.result_locator import TextRange, locate_finding
from lens_core.schema_gate import SchemaPromptGate
from lens_core.session_state import AnalysisKind, Document, EngineTask, SessionState
from lens_services.document_io_service import prepare_display_text

_LOG = logging.getLogger(__name__)


def _noop(*_args: Any) -> None:
    return None


class RequestOrchestrator:
    def __init__(
        self,
        session: SessionState,
        engine: Any,
        document_source: Any,
        runner: Any,
        *,
        on_change: Callable[[SessionState], Any] | None = None,
        on_highlight: Callable[[TextRange | None, Finding], Any] | None = None,
        timeout_s: float | None = None,
        scheduler: Callable[[int, Callable[[], Any]], Any] | None = None,
        schema_placeholder: str | None = None,
    ) -> None:
        self.session = session
        self.engine = engine
        self.document_source = document_source
        self.runner = runner
        self.on_change = on_change or _noop
        self.on_highlight = on_highlight or _noop
        self.timeout_s = timeout_s
        self.scheduler = scheduler
        gate_args = () if schema_placeholder is None else (schema_placeholder,)
        self.schema_gate = SchemaPromptGate(self.confirm_numeric_scan, *gate_args)
        self._request_ids = itertools.count(1)

    # -- document lifecycle -------------------------------------------------

    def open_document(self, document_source: Any = None) -> bool:
        """Open a document through ``document_source`` (default: the configured source)."""
        if self.session.is_loading:
            return False
        source = document_source if document_source is not None else self.document_source
        self.session.reset()
        task = EngineTask(next(self._request_ids), AnalysisKind.NONE)
        self.session.begin(AnalysisKind.NONE, task)
        self.on_change(self.session)
        self._start(task, lambda: self._open_work(source), self._finish_open, FileError)
        return True

    @staticmethod
    def _open_work(source: Any) -> tuple[str, str, str]:
        raw_text = source.open_and_read_document()
        pretty_text = prepare_display_text(raw_text)
        return raw_text, pretty_text, str(getattr(source, "path", "") or "")

    def _finish_open(self, task: EngineTask) -> None:
        raw_text, pretty_text, path = task.payload
        self.session.document = Document(raw_text, pretty_text, path)
        self.session.reset()
        _LOG.info("Opened document %s (%d chars).", path or "<unnamed>", len(raw_text))
        self.on_change(self.session)

    def close_document(self) -> bool:
        if self.session.is_loading:
            return False
        self.session.document = None
        self.session.reset()
        self.on_change(self.session)
        return True

    def update_displayed_text(self, text: str) -> None:
        document = self.session.document
        if document is not None:
            document.displayed_text = str(text)

    # -- analyses -----------------------------------------------------------

    def run_empty_value_scan(self) -> bool:
        document = self.session.document
        if document is None or self.session.is_loading:
            return False
        original_text = document.original_text
        return self._begin_scan(
            AnalysisKind.EMPTY_SCAN,
            lambda: result_set_from_payload(FINDING_KIND_EMPTY, self.engine.scan_empty_values(original_text)),
        )

    def request_numeric_scan_prompt(self) -> bool:
        if self.session.document is None:
            return False
        self.schema_gate.show()
        self.on_change(self.session)
        return True

    def cancel_numeric_scan_prompt(self) -> None:
        self.schema_gate.cancel()
        self.on_change(self.session)

    def confirm_numeric_scan(self, schema_text: str) -> bool:
        schema = str(schema_text or "")
        if not schema.strip():
            return False
        self.schema_gate.hide()
        document = self.session.document
        if document is None or self.session.is_loading:
            self.on_change(self.session)
            return False
        original_text = document.original_text
        return self._begin_scan(
            AnalysisKind.NUMERIC_SCAN,
            lambda: result_set_from_payload(
                FINDING_KIND_NUMERIC,
                self.engine.scan_invalid_numerics(original_text, schema),
            ),
        )

    def _begin_scan(self, kind: AnalysisKind, work: Callable[[], Any]) -> bool:
        task = EngineTask(next(self._request_ids), kind)
        if not self.session.begin(kind, task):
            return False
        _LOG.info("Starting %s (request %d).", kind.value, task.request_id)
        self.on_change(self.session)
        self._start(task, work, self._finish_scan, EngineError)
        return True

    def _finish_scan(self, task: EngineTask) -> None:
        results = task.payload
        self.session.succeed(results)
        _LOG.info("%s finished: %d findings in %dms.", task.kind.value, len(results), results.elapsed_ms)
        self.on_change(self.session)
        first = results.first()
        if first is not None:
            self.select_finding(first)

    # -- highlight ----------------------------------------------------------

    def select_finding(self, finding: Finding) -> TextRange | None:
        document = self.session.document
        text = document.displayed_text if document is not None else ""
        found = locate_finding(text, finding)
        self.on_highlight(found, finding)
        return found

    # -- task plumbing ------------------------------------------------------

    def _start(
        self,
        task: EngineTask,
        work: Callable[[], Any],
        on_success: Callable[[EngineTask], Any],
        error_type: type[Exception],
    ) -> None:
        def on_done(completed: EngineTask) -> None:
            if not self._is_active(completed):
                _LOG.debug("Ignoring stale completion of request %d.", completed.request_id)
                return
            if completed.error is not None:
                self._fail(completed.error)
                return
            on_success(completed)

        if self.timeout_s is not None and self.scheduler is not None:
            delay_ms = max(0, int(float(self.timeout_s) * 1000))
            self.scheduler(delay_ms, lambda: self._expire(task, error_type))
        self.runner.start(task, work, on_done)

    def _is_active(self, task: EngineTask) -> bool:
        active = self.session.active_task
        return active is not None and active.request_id == task.request_id and self.session.is_loading

    def _expire(self, task: EngineTask, error_type: type[Exception]) -> None:
        if not self._is_active(task):
            return
        label = "Opening the document" if error_type is FileError else "Analysis"
        self._fail(error_type(f"{label} timed out after {self.timeout_s:g} s."))

    def _fail(self, error: BaseException) -> None:
        message = str(error) or type(error).__name__
        self.session.fail(message)
        _LOG.warning("Request failed: %s", message)
        self.on_change(self.session)
