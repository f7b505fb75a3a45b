"""Process-wide logging setup: stdout plus a size-capped log file."""

import logging
import logging.handlers
import os
import sys
from typing import Any

from lens_core import constants as app_constants

_HANDLER_MARK = "_json_lens_handler"


def log_file_path(runtime_dir: Any) -> str:
    return os.path.join(str(runtime_dir), app_constants.LOG_FILENAME)


def configure_logging(runtime_dir: Any=None, level: Any="INFO") -> logging.Logger:
    """Attach the app's handlers to the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(str(level or "INFO").upper())
    if any(getattr(handler, _HANDLER_MARK, False) for handler in root.handlers):
        return root
    formatter = logging.Formatter(app_constants.LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    setattr(stream_handler, _HANDLER_MARK, True)
    root.addHandler(stream_handler)

    if runtime_dir:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file_path(runtime_dir),
                maxBytes=app_constants.LOG_MAX_BYTES,
                backupCount=app_constants.LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as exc:
            root.warning("File logging disabled: %s", exc)
        else:
            file_handler.setFormatter(formatter)
            setattr(file_handler, _HANDLER_MARK, True)
            root.addHandler(file_handler)
    return root
