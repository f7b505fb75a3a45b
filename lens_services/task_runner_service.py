"""Runners that execute one engine task and hand its outcome back to the UI thread.

A runner takes the task record, a ``work`` callable, and an ``on_done``
callback. ``work`` runs off the UI thread; ``on_done(task)`` always runs on it,
with ``task.done`` set and either ``task.payload`` or ``task.error`` filled.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from lens_core.exceptions import TASK_ERRORS
from lens_core.session_state import EngineTask
from lens_services.ui_dispatch_service import dispatch_to_ui

_LOG = logging.getLogger(__name__)


def _run_work(task: EngineTask, work: Callable[[], Any]) -> tuple[Any, BaseException | None]:
    try:
        return work(), None
    except TASK_ERRORS as exc:
        _LOG.warning("Task %s (%s) failed: %s", task.request_id, task.kind.value, exc)
        return None, exc
    except Exception as exc:
        # Any failure must reach on_done, or the session never leaves Loading.
        _LOG.warning("Task %s (%s) raised unexpectedly.", task.request_id, task.kind.value, exc_info=exc)
        return None, exc


class InlineTaskRunner:
    """Runs work synchronously on the calling thread."""

    def start(self, task: EngineTask, work: Callable[[], Any], on_done: Callable[[EngineTask], Any]) -> None:
        payload, error = _run_work(task, work)
        on_done(_completed(task, payload, error))


class ThreadedTaskRunner:
    """Runs work on a daemon thread and re-enters the Tk loop via ``root.after``."""

    def __init__(self, owner: Any) -> None:
        self.owner = owner

    def start(self, task: EngineTask, work: Callable[[], Any], on_done: Callable[[EngineTask], Any]) -> threading.Thread:
        def worker() -> None:
            payload, error = _run_work(task, work)
            dispatch_to_ui(self.owner, on_done, _completed(task, payload, error))

        thread = threading.Thread(target=worker, name=f"lens-task-{task.request_id}", daemon=True)
        thread.start()
        return thread


def _completed(task: EngineTask, payload: Any, error: BaseException | None) -> EngineTask:
    # A fresh record so a late worker never mutates a task the UI already settled.
    return EngineTask(
        request_id=task.request_id,
        kind=task.kind,
        done=True,
        payload=payload,
        error=error,
    )
