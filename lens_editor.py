import logging
import sys
import tkinter as tk
import tkinter.font as tkfont
from tkinter import filedialog, ttk

from lens_core import constants as app_constants
from lens_core.exceptions import EXPECTED_ERRORS
from lens_core.result_locator import text_index_for_offset, utf16_offset
from lens_core.session_state import Phase, SessionState
from lens_services import settings_service
from lens_services import status_service
from lens_services import theme_service
from lens_services.analysis_engine_service import LocalAnalysisEngine
from lens_services.document_io_service import PathDocumentSource, TkDocumentSource
from lens_services.log_service import configure_logging
from lens_services.request_orchestrator_service import RequestOrchestrator
from lens_services.task_runner_service import ThreadedTaskRunner

_LOG = logging.getLogger(__name__)
# Tk before 8.7 indexes non-BMP characters as surrogate pairs.
_TK_COUNTS_UTF16 = tk.TkVersion < 8.7


class JsonLensEditor:
    def __init__(self, root, path=None, settings=None):
        self.root = root
        self.settings = settings if isinstance(settings, dict) else settings_service.default_settings()
        self._theme = theme_service.theme_palette_for_variant(self.settings.get("app_theme"))
        self._font_size = int(self.settings.get("font_size", app_constants.FONT_SIZE_DEFAULT))
        self._shown_document = None
        self._shown_results = None
        self._schema_window = None
        self._schema_text = None

        self.session = SessionState()
        self.orchestrator = RequestOrchestrator(
            self.session,
            LocalAnalysisEngine(),
            TkDocumentSource(self, filedialog),
            ThreadedTaskRunner(self),
            on_change=self._on_session_change,
            on_highlight=self._on_highlight,
            timeout_s=self.settings.get("engine_timeout_s"),
            scheduler=self.root.after,
            schema_placeholder=self.settings.get("schema_placeholder"),
        )

        self._build_ui()
        self._on_session_change(self.session)
        if path:
            self.orchestrator.open_document(PathDocumentSource(path))

    # -- UI construction ------------------------------------------------------

    def _build_ui(self):
        theme = self._theme
        self.root.title(app_constants.APP_NAME)
        self.root.geometry("1100x720")
        self.root.configure(bg=theme["bg"])
        self._apply_ttk_theme()

        toolbar = ttk.Frame(self.root)
        toolbar.pack(fill="x", padx=4, pady=(4, 2))
        self.open_button = ttk.Button(toolbar, text="Open", command=self.orchestrator.open_document)
        self.empty_button = ttk.Button(toolbar, text="Scan Empty Values", command=self.orchestrator.run_empty_value_scan)
        self.numeric_button = ttk.Button(
            toolbar, text="Scan Invalid Numerics", command=self.orchestrator.request_numeric_scan_prompt
        )
        self.close_button = ttk.Button(toolbar, text="Close", command=self.orchestrator.close_document)
        for button in (self.open_button, self.empty_button, self.numeric_button, self.close_button):
            button.pack(side="left", padx=(0, 4))

        # Status bar is packed before the body so it keeps its space when the window shrinks.
        status_bar = ttk.Frame(self.root)
        self._status_bar = status_bar
        status_bar.pack(fill="x", side="bottom", padx=4, pady=(2, 4))
        self.status_badge = tk.Label(status_bar, bg=theme["bg"], bd=0)
        self.status_badge.pack(side="left", padx=(0, 6))
        self.status = ttk.Label(status_bar, text="", anchor="w")
        self.status.pack(side="left", fill="x", expand=True)

        body = ttk.Panedwindow(self.root, orient="horizontal")
        body.pack(fill="both", expand=True, padx=4, pady=2)
        left = ttk.Frame(body)
        right = ttk.Frame(body)
        body.add(left, weight=3)
        body.add(right, weight=1)

        self._text_font = tkfont.Font(family="Consolas", size=self._font_size)
        self.text = tk.Text(
            left,
            wrap="none",
            undo=False,
            font=self._text_font,
            bg=theme["text_bg"],
            fg=theme["text_fg"],
            insertbackground=theme["insert_fg"],
            selectbackground=theme["select_bg"],
            selectforeground=theme["select_fg"],
            relief="flat",
            borderwidth=0,
        )
        text_scroll_y = ttk.Scrollbar(left, orient="vertical", command=self.text.yview)
        text_scroll_x = ttk.Scrollbar(left, orient="horizontal", command=self.text.xview)
        self.text.configure(yscrollcommand=text_scroll_y.set, xscrollcommand=text_scroll_x.set)
        text_scroll_y.pack(side="right", fill="y")
        text_scroll_x.pack(side="bottom", fill="x")
        self.text.pack(side="left", fill="both", expand=True)
        self.text.tag_config(app_constants.HIGHLIGHT_TAG, background=theme["match_bg"], foreground=theme["match_fg"])
        self.text.bind("<<Modified>>", self._on_text_modified)

        ttk.Label(right, text="Findings").pack(anchor="w", padx=4, pady=(0, 2))
        self.findings_list = tk.Listbox(
            right,
            activestyle="none",
            exportselection=False,
            bg=theme["panel"],
            fg=theme["fg"],
            selectbackground=theme["select_bg"],
            selectforeground=theme["select_fg"],
            relief="flat",
            borderwidth=0,
        )
        list_scroll = ttk.Scrollbar(right, orient="vertical", command=self.findings_list.yview)
        self.findings_list.configure(yscrollcommand=list_scroll.set)
        list_scroll.pack(side="right", fill="y")
        self.findings_list.pack(side="left", fill="both", expand=True)
        self.findings_list.bind("<<ListboxSelect>>", self._on_finding_selected)

        self.error_panel = tk.Label(
            self.root,
            text="",
            anchor="w",
            justify="left",
            bg=theme["error_bg"],
            fg=theme["error_fg"],
            padx=8,
            pady=4,
        )

    def _apply_ttk_theme(self):
        theme = self._theme
        style = ttk.Style(self.root)
        try:
            style.theme_use("clam")
        except tk.TclError as exc:
            _LOG.debug('expected_error', exc_info=exc)
        style.configure("TFrame", background=theme["bg"])
        style.configure("TLabel", background=theme["bg"], foreground=theme["fg"])
        style.configure("TButton", background=theme["accent"], foreground=theme["fg"], borderwidth=0, padding=(10, 4))
        style.map(
            "TButton",
            background=[("disabled", theme["panel"]), ("active", theme["button_active"])],
            foreground=[("disabled", theme["border"])],
        )

    # -- session rendering ----------------------------------------------------

    def _on_session_change(self, session):
        loading = session.phase is Phase.LOADING
        has_document = session.document is not None
        self.open_button.state(["disabled"] if loading else ["!disabled"])
        scan_state = ["disabled"] if loading or not has_document else ["!disabled"]
        self.empty_button.state(scan_state)
        self.numeric_button.state(scan_state)
        self.close_button.state(scan_state)

        self.root.title(status_service.window_title(session))
        self.status.config(text=status_service.status_text(session))
        badge = theme_service.phase_badge_photo(self, session.phase)
        if badge is not None:
            self.status_badge.config(image=badge)

        if session.phase is Phase.ERROR and session.error_message:
            self.error_panel.config(text=session.error_message)
            self.error_panel.pack(fill="x", side="bottom", padx=4, after=self._status_bar)
        else:
            self.error_panel.pack_forget()

        if session.document is not self._shown_document:
            self._show_document_text(session.document)
        if session.results is not self._shown_results:
            self._show_findings(session.results)
        self._sync_schema_prompt()

    def _show_document_text(self, document):
        self._shown_document = document
        self.text.delete("1.0", "end")
        if document is not None:
            self.text.insert("1.0", document.displayed_text)
        self.text.edit_modified(False)

    def _show_findings(self, results):
        self._shown_results = results
        self.findings_list.delete(0, "end")
        for finding in results:
            self.findings_list.insert("end", status_service.finding_label(finding))
        self.text.tag_remove(app_constants.HIGHLIGHT_TAG, "1.0", "end")

    def _on_highlight(self, text_range, finding):
        if text_range is None:
            _LOG.debug("No text match for %s", finding)
            return
        start_offset, end_offset = text_range
        document = self.session.document
        if _TK_COUNTS_UTF16 and document is not None:
            shown = document.displayed_text
            start_offset = utf16_offset(shown, start_offset)
            end_offset = utf16_offset(shown, end_offset)
        start = text_index_for_offset(start_offset)
        end = text_index_for_offset(end_offset)
        self.text.tag_remove(app_constants.HIGHLIGHT_TAG, "1.0", "end")
        self.text.tag_add(app_constants.HIGHLIGHT_TAG, start, end)
        self.text.mark_set("insert", end)
        self.text.see(start)

    def _on_text_modified(self, _event=None):
        if not self.text.edit_modified():
            return
        self.orchestrator.update_displayed_text(self.text.get("1.0", "end-1c"))
        self.text.edit_modified(False)

    def _on_finding_selected(self, _event=None):
        selection = self.findings_list.curselection()
        if not selection:
            return
        findings = self.session.results.findings
        index = int(selection[0])
        if 0 <= index < len(findings):
            self.orchestrator.select_finding(findings[index])

    # -- schema prompt ----------------------------------------------------------

    def _sync_schema_prompt(self):
        gate = self.orchestrator.schema_gate
        window = self._schema_window
        if gate.visible and window is None:
            self._open_schema_window(gate.pending_schema_text)
        elif not gate.visible and window is not None:
            self._schema_window = None
            self._schema_text = None
            try:
                window.destroy()
            except tk.TclError as exc:
                _LOG.debug('expected_error', exc_info=exc)

    def _open_schema_window(self, initial_text):
        theme = self._theme
        window = tk.Toplevel(self.root)
        window.title("Table schema")
        window.configure(bg=theme["bg"])
        window.transient(self.root)
        ttk.Label(window, text="Paste a CREATE TABLE statement describing the records:").pack(
            anchor="w", padx=8, pady=(8, 4)
        )
        schema_text = tk.Text(
            window,
            width=64,
            height=12,
            font=self._text_font,
            bg=theme["text_bg"],
            fg=theme["text_fg"],
            insertbackground=theme["insert_fg"],
            relief="flat",
        )
        schema_text.insert("1.0", initial_text)
        schema_text.pack(fill="both", expand=True, padx=8)
        buttons = ttk.Frame(window)
        buttons.pack(fill="x", padx=8, pady=8)
        ttk.Button(buttons, text="Cancel", command=self.orchestrator.cancel_numeric_scan_prompt).pack(side="right")
        ttk.Button(buttons, text="Confirm", command=self._confirm_schema_prompt).pack(side="right", padx=(0, 4))
        window.protocol("WM_DELETE_WINDOW", self.orchestrator.cancel_numeric_scan_prompt)
        self._schema_window = window
        self._schema_text = schema_text
        schema_text.focus_set()

    def _confirm_schema_prompt(self):
        if self._schema_text is None:
            return
        text = self._schema_text.get("1.0", "end-1c")
        if not self.orchestrator.schema_gate.confirm(text):
            # Blank schema: prompt closes without a scan.
            self.orchestrator.cancel_numeric_scan_prompt()


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    path = args[0] if args else None
    runtime_dir = settings_service.runtime_data_dir(create=True)
    settings = settings_service.load_user_settings(settings_service.settings_path(runtime_dir))
    configure_logging(runtime_dir, settings.get("log_level"))
    _LOG.info("%s %s starting.", app_constants.APP_NAME, app_constants.APP_VERSION)
    root = tk.Tk()
    try:
        JsonLensEditor(root, path, settings)
    except EXPECTED_ERRORS:
        _LOG.exception("Failed to build the editor window.")
        root.destroy()
        raise
    root.mainloop()


if __name__ == "__main__":
    main()
