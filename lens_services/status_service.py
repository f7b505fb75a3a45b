"""Status-line text and findings-list labels."""

from typing import Any

from lens_core import constants as app_constants
from lens_core.findings import InvalidNumericFinding
from lens_core.session_state import AnalysisKind, Phase


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def status_text(session: Any) -> str:
    phase = session.phase
    kind = session.active_kind
    match phase:
        case Phase.LOADING:
            if kind is AnalysisKind.EMPTY_SCAN:
                return app_constants.STATUS_SCANNING_EMPTY
            if kind is AnalysisKind.NUMERIC_SCAN:
                return app_constants.STATUS_SCANNING_NUMERIC
            return app_constants.STATUS_OPENING
        case Phase.SUCCESS:
            results = session.results
            noun = "empty value" if kind is AnalysisKind.EMPTY_SCAN else "invalid numeric value"
            return f"Found {_plural(len(results), noun)} in {results.elapsed_ms}ms."
        case Phase.ERROR:
            return f"Error: {session.error_message}"
        case _:
            if session.document is None:
                return app_constants.STATUS_READY
            return app_constants.STATUS_DOCUMENT_READY


def finding_label(finding: Any) -> str:
    prefix = f"[{finding.object_index}] {finding.key}"
    if isinstance(finding, InvalidNumericFinding):
        return f"{prefix}: not numeric ({finding.value})"
    return f"{prefix}: empty"


def window_title(session: Any) -> str:
    document = session.document
    if document is None or not document.path:
        return app_constants.APP_NAME
    return f"{app_constants.APP_NAME} - {document.path}"
