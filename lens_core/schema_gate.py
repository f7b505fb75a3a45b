"""Schema prompt gate for numeric-validation requests."""

from __future__ import annotations

from typing import Any, Callable

from lens_core.constants import DEFAULT_SCHEMA_PLACEHOLDER


class SchemaPromptGate:
    """Holds the prompt visibility and the schema text the user is editing.

    The gate only decides whether a confirmed schema may be forwarded; it
    never calls the analysis engine itself.
    """

    def __init__(self, on_confirm: Callable[[str], Any], placeholder: str = DEFAULT_SCHEMA_PLACEHOLDER) -> None:
        self._on_confirm = on_confirm
        self.visible = False
        self.pending_schema_text = str(placeholder or "")

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def cancel(self) -> None:
        self.visible = False

    def confirm(self, text: str) -> bool:
        schema_text = str(text or "")
        self.visible = False
        if not schema_text.strip():
            return False
        self.pending_schema_text = schema_text
        self._on_confirm(schema_text)
        return True
