"""Shared exception classes and expected-error tuple for services/core."""

from __future__ import annotations

from typing import Final, TypeAlias


class AppError(Exception):
    """Base class for expected application-layer failures."""


class FileError(AppError):
    """Raised when a document cannot be chosen, read, or parsed on open."""


class EngineError(AppError):
    """Raised when an analysis scan is rejected or fails."""


EXPECTED_ERRORS: TypeAlias = (
    OSError,
    ValueError,
    TypeError,
    RuntimeError,
    AttributeError,
    KeyError,
    IndexError,
    ImportError,
)

# Worker tasks convert these into a user-facing message instead of crashing.
TASK_ERRORS: Final = (AppError,) + EXPECTED_ERRORS
