"""UI-thread dispatch helpers for Tk callback execution."""

import logging
import threading
from typing import Any

from lens_core.exceptions import EXPECTED_ERRORS

_LOG = logging.getLogger(__name__)


def dispatch_to_ui(owner: Any, callback: Any, *args: Any, wait: Any=False, default: Any=None, timeout: Any=None, **kwargs: Any) -> Any:
    """Run callback on the UI thread; from a worker, optionally block until it returns.

    Without a Tk root (headless use, tests) the callback runs inline.
    """
    root = getattr(owner, "root", None)
    if root is None or threading.current_thread() is threading.main_thread():
        return callback(*args, **kwargs)

    if not wait:
        try:
            root.after(0, lambda: callback(*args, **kwargs))
        except EXPECTED_ERRORS as exc:
            _LOG.debug('expected_error', exc_info=exc)
        return default

    result = {"value": default, "error": None}
    done = threading.Event()

    def invoke_sync() -> Any:
        try:
            result["value"] = callback(*args, **kwargs)
        except Exception as exc:
            # Re-raised on the waiting worker thread below.
            result["error"] = exc
        finally:
            done.set()

    try:
        root.after(0, invoke_sync)
    except EXPECTED_ERRORS as exc:
        _LOG.debug('expected_error', exc_info=exc)
        return default
    if not done.wait(None if timeout is None else max(0.0, float(timeout))):
        return default
    if result["error"] is not None:
        raise result["error"]
    return result["value"]
